"""
Subscription workflows: subscribe (with confirmation email) and unsubscribe.
"""

from typing import Tuple

from shared.logging import get_logger
from shared.errors import NotFoundError, NotificationError, ValidationError
from ..models import SubscribeRequest, Subscriber


class SubscriptionService:
    """Coordinates the subscriber store and the confirmation mailer."""

    def __init__(self, store, mailer, metrics=None):
        self.store = store
        self.mailer = mailer
        self.metrics = metrics
        self.logger = get_logger("events.subscriptions")

    async def subscribe(self, request: SubscribeRequest) -> Tuple[Subscriber, bool]:
        """Record interest in an event and send the confirmation email.

        Returns (subscriber, created). The email goes out on every call, new
        subscriber or not. A mail failure after the record was saved raises
        NotificationError with ``subscriber_saved`` set so callers can tell it
        apart from a store failure.
        """
        missing = request.missing_fields()
        if missing:
            raise ValidationError("Missing required fields", details={"missing": missing})

        subscriber, created = await self.store.upsert_subscription(
            name=request.name,
            email=request.email,
            event_id=request.event_id,
            subscribe=request.subscribe,
        )
        self._record("create" if created else "update")
        self.logger.info(
            "Subscriber saved",
            email=subscriber.email,
            created=created,
            subscribed=subscriber.subscribed,
        )

        try:
            await self.mailer.send_confirmation(request.email, request.event_url)
        except NotificationError as exc:
            exc.details = {"subscriber_saved": True, "reason": exc.details}
            raise

        return subscriber, created

    async def unsubscribe(self, email: str) -> Subscriber:
        subscriber = await self.store.unsubscribe(email)
        if subscriber is None:
            raise NotFoundError("Subscriber not found")

        self._record("unsubscribe")
        self.logger.info("Subscriber unsubscribed", email=email)
        return subscriber

    def _record(self, operation: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("subscriber_operations_total", operation=operation)
