"""
Request, response and document models for the events service.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SubscribeRequest(BaseModel):
    """Body of POST /api/subscribers.

    Every field is optional at the schema level so that missing values are
    reported as a single validation error rather than a FastAPI 422.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    event_id: Optional[str] = Field(None, alias="eventId")
    subscribe: Optional[bool] = None
    event_url: Optional[str] = Field(None, alias="eventUrl")

    def missing_fields(self) -> List[str]:
        """Return the wire names of required fields that are absent or empty."""
        required = {
            "name": self.name,
            "email": self.email,
            "eventId": self.event_id,
            "eventUrl": self.event_url,
        }
        return [field for field, value in required.items() if not value]


class Subscriber(BaseModel):
    """Subscriber document as stored in the `subscribers` collection."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    events: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    subscribed: bool = True
    last_email_sent: Optional[datetime] = Field(None, alias="lastEmailSent")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
    )


class SubscriberSummary(BaseModel):
    """Public view of a subscriber returned by the API."""

    name: str
    email: str
    subscribed: bool


class SubscribeResponse(BaseModel):
    message: str
    subscriber: SubscriberSummary


class MessageResponse(BaseModel):
    message: str


class EventsPage(BaseModel):
    """Paging block of the reshaped events listing."""

    size: int
    total_elements: int = Field(0, alias="totalElements")
    total_pages: int = Field(0, alias="totalPages")
    number: int

    model_config = ConfigDict(populate_by_name=True)


class EventsListing(BaseModel):
    """Reshaped upstream events payload."""

    embedded: Dict[str, List[Dict[str, Any]]] = Field(alias="_embedded")
    page: EventsPage

    model_config = ConfigDict(populate_by_name=True)
