"""
Ticketmaster discovery API client for the events service.
"""

from typing import Any, Dict, Sequence, Tuple
import httpx

from shared.logging import get_logger
from shared.errors import (
    ExternalServiceError,
    RateLimitError,
    UpstreamAuthError,
    UpstreamRequestError,
)


class TicketmasterClient:
    """Client for the Ticketmaster discovery events search."""

    def __init__(self, base_url: str, timeout: float = 10.0, metrics=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger("events.ticketmaster_client")

    async def search_events(self, params: Sequence[Tuple[str, str]]) -> Dict[str, Any]:
        """Run an events search and return the raw upstream payload.

        Non-success statuses are mapped onto local errors:
        400 -> UpstreamRequestError, 401 -> UpstreamAuthError,
        429 -> RateLimitError, anything else -> ExternalServiceError.
        """
        url = f"{self.base_url}/events.json"
        # Never log the API key
        safe_params = [(k, v) for k, v in params if k != "apikey"]
        self.logger.info("Fetching events", params=safe_params)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url, params=list(params))
        except httpx.HTTPError as exc:
            self.logger.error("Events API unreachable", error=str(exc))
            self._record("network_error")
            raise ExternalServiceError(
                "Failed to fetch events",
                details=str(exc) or exc.__class__.__name__
            )

        self._record(str(response.status_code))

        if response.is_success:
            try:
                return response.json()
            except ValueError:
                self.logger.error("Events API returned a non-JSON body", response=response.text)
                raise ExternalServiceError("Failed to fetch events", details=response.text)

        body = self._decode_body(response)
        self.logger.error(
            "Events API request failed",
            status_code=response.status_code,
            response=body
        )

        if response.status_code == 400:
            raise UpstreamRequestError(details=body)
        if response.status_code == 401:
            raise UpstreamAuthError(details="Please check your API key configuration")
        if response.status_code == 429:
            raise RateLimitError(details="Please try again later")
        raise ExternalServiceError(
            "Failed to fetch events",
            details=body if body else f"Upstream status {response.status_code}"
        )

    @staticmethod
    def _decode_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _record(self, status: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("upstream_requests_total", status=status)
