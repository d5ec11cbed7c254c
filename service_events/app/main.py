"""
Events service for the Sydney Events backend.

Routes:
- POST /api/subscribers: record interest in an event, send confirmation mail
- PUT  /api/subscribers/unsubscribe/{email}: clear the subscribed flag
- GET  /api/events: cached, validated proxy to the Ticketmaster search API
- GET  /{path}: single-page-app fallback
"""

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Query, Request
from fastapi.responses import FileResponse, JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import EventsLayerException, ExternalServiceError, NotFoundError, ServiceError

from .adapters import ConfirmationMailer, TicketmasterClient, build_store
from .caching import ResponseCache
from .domain import EventSearchQuery, SubscriptionService, reshape_events
from .models import MessageResponse, SubscribeRequest, SubscribeResponse, SubscriberSummary


class EventsService(BaseService):
    """Events service implementation.

    Collaborators may be injected (tests, alternative deployments); anything
    not supplied is built from configuration.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        store=None,
        events_client=None,
        mailer=None,
        cache: Optional[ResponseCache] = None,
    ):
        super().__init__("events", config)

        if store is None:
            store = build_store(self.config.mongodb_uri, self.config.mongodb_database)
        if events_client is None:
            events_client = TicketmasterClient(
                self.config.ticketmaster_base_url,
                timeout=self.config.upstream_timeout_seconds,
                metrics=self.metrics,
            )
        if mailer is None:
            mailer = ConfirmationMailer(
                self.config.email_user,
                self.config.email_password,
                hostname=self.config.smtp_host,
                port=self.config.smtp_port,
                metrics=self.metrics,
            )
        if cache is None:
            cache = ResponseCache(
                ttl_seconds=self.config.events_cache_ttl_seconds,
                max_entries=self.config.events_cache_max_entries,
            )

        self.store = store
        self.events_client = events_client
        self.mailer = mailer
        self.cache = cache
        self.subscriptions = SubscriptionService(self.store, self.mailer, metrics=self.metrics)
        self.static_dir = Path(self.config.static_dir)

        if not self.config.ticketmaster_api_key:
            self.logger.warning("TICKETMASTER_API_KEY not set; event searches will be rejected upstream")

        @self.app.on_event("startup")
        async def _startup():
            await self.store.start()
            self.logger.info("Server running", port=self.config.port)

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.store.stop()

        self._setup_subscriber_routes()
        self._setup_events_routes()
        # Must stay last: it matches every GET path
        self._setup_spa_fallback()

        # Expose service instance via app state for introspection/testing
        self.app.state.events_service = self

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"subscriber_store": "ok" if await self.store.ping() else "error"}

    def _health_details(self) -> Dict[str, Any]:
        return {"events_cache": self.cache.stats()}

    def _setup_subscriber_routes(self):
        """Set up subscriber routes."""

        @self.app.post("/api/subscribers", response_model=SubscribeResponse)
        async def save_subscriber(payload: SubscribeRequest):
            """Create or update a subscriber and send the confirmation email."""
            try:
                subscriber, created = await self.subscriptions.subscribe(payload)
            except EventsLayerException:
                raise
            except Exception as e:
                self.logger.error("Error creating/updating subscriber", error=str(e), exc_info=True)
                raise ServiceError()

            body = SubscribeResponse(
                message="Subscriber created successfully" if created else "Subscriber updated successfully",
                subscriber=SubscriberSummary(
                    name=subscriber.name,
                    email=subscriber.email,
                    subscribed=subscriber.subscribed,
                ),
            )
            return JSONResponse(status_code=201 if created else 200, content=body.model_dump())

        @self.app.put("/api/subscribers/unsubscribe/{email}", response_model=MessageResponse)
        async def unsubscribe(email: str):
            """Mark a subscriber as unsubscribed. No email is sent."""
            try:
                await self.subscriptions.unsubscribe(email)
            except EventsLayerException:
                raise
            except Exception as e:
                self.logger.error("Error unsubscribing", error=str(e), exc_info=True)
                raise ServiceError()

            return MessageResponse(message="Unsubscribed successfully")

    def _setup_events_routes(self):
        """Set up the events proxy."""

        @self.app.get("/api/events")
        async def get_events(
            request: Request,
            size: Optional[str] = Query(None),
            page: Optional[str] = Query(None),
            segment_id: Optional[str] = Query(None, alias="segmentId"),
            keyword: Optional[str] = Query(None),
            start_date_time: Optional[str] = Query(None, alias="startDateTime"),
            end_date_time: Optional[str] = Query(None, alias="endDateTime"),
            price_range: Optional[str] = Query(None, alias="priceRange"),
        ):
            """Search Sydney events through the upstream API, cached per URL."""
            cache_key = request.url.path
            if request.url.query:
                cache_key = f"{cache_key}?{request.url.query}"

            cached = self.cache.get(cache_key)
            if cached is not None:
                self.metrics.increment_counter("cache_hits_total", cache_type="events")
                self.logger.debug("Serving events from cache", cache_key=cache_key)
                return JSONResponse(content=cached)
            self.metrics.increment_counter("cache_misses_total", cache_type="events")

            query = EventSearchQuery.from_params({
                "size": size,
                "page": page,
                "segmentId": segment_id,
                "keyword": keyword,
                "startDateTime": start_date_time,
                "endDateTime": end_date_time,
                "priceRange": price_range,
            })
            params = query.to_upstream_params(
                self.config.ticketmaster_api_key,
                self.config.event_city,
                self.config.event_country_code,
            )

            try:
                payload = await self.events_client.search_events(params)
                listing = reshape_events(payload, query)
            except EventsLayerException:
                raise
            except Exception as e:
                self.logger.error("Error fetching events", error=str(e), exc_info=True)
                raise ExternalServiceError("Failed to fetch events")

            self.cache.set(cache_key, listing)
            return JSONResponse(content=listing)

    def _setup_spa_fallback(self):
        """Serve the front-end bundle for any unmatched GET path."""

        @self.app.get("/{full_path:path}", include_in_schema=False)
        async def spa_fallback(full_path: str):
            root = self.static_dir.resolve()
            if full_path:
                candidate = (root / full_path).resolve()
                if candidate.is_relative_to(root) and candidate.is_file():
                    return FileResponse(candidate)

            index = root / "index.html"
            if index.is_file():
                return FileResponse(index)
            raise NotFoundError("Not found")


def create_app(config: Optional[ServiceConfig] = None, **components):
    """Create FastAPI application."""
    service = EventsService(config, **components)
    return service.app


def main():
    """Run the events service with configuration from the environment."""
    EventsService().run()


if __name__ == "__main__":
    main()
