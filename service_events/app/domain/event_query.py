"""
Validation and sanitization of event-search queries.

Callers send loosely typed query strings; anything that fails validation is
dropped rather than rejected, so a bad filter never fails the whole search.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..models import EventsListing, EventsPage


DEFAULT_SIZE = 12
MIN_SIZE = 1
MAX_SIZE = 50
DEFAULT_PAGE = 0

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_SEGMENT_ID = re.compile(r"^[A-Za-z0-9]+$")
_PRICE_RANGE = re.compile(r"^\d+-\d+$")
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_ANGLE_BRACKETS = re.compile(r"[<>]")


def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """Parse the integer prefix of value ("20abc" -> 20, "abc" -> None)."""
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def validate_size(value: Optional[str]) -> int:
    size = parse_leading_int(value)
    if size is None:
        size = DEFAULT_SIZE
    return min(max(size, MIN_SIZE), MAX_SIZE)


def validate_page(value: Optional[str]) -> int:
    page = parse_leading_int(value)
    if page is None:
        page = DEFAULT_PAGE
    return max(page, 0)


def validate_segment_id(value: Optional[str]) -> Optional[str]:
    if value and _SEGMENT_ID.match(value):
        return value
    return None


def sanitize_keyword(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    sanitized = _ANGLE_BRACKETS.sub("", value.strip())
    return sanitized or None


def is_valid_iso_datetime(value: Optional[str]) -> bool:
    """True when value starts with YYYY-MM-DDTHH:MM:SS and parses as a date/time."""
    if not value or not _ISO_PREFIX.match(value):
        return False

    candidate = value
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        return False
    return True


def validate_datetime(value: Optional[str]) -> Optional[str]:
    return value if is_valid_iso_datetime(value) else None


def validate_price_range(value: Optional[str]) -> Optional[str]:
    if value and _PRICE_RANGE.match(value):
        return value
    return None


@dataclass(frozen=True)
class EventSearchQuery:
    """Validated event-search parameters, paging expressed 0-based."""

    size: int = DEFAULT_SIZE
    page: int = DEFAULT_PAGE
    segment_id: Optional[str] = None
    keyword: Optional[str] = None
    start_date_time: Optional[str] = None
    end_date_time: Optional[str] = None
    price_range: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "EventSearchQuery":
        """Build a query from raw inbound query parameters."""
        return cls(
            size=validate_size(params.get("size")),
            page=validate_page(params.get("page")),
            segment_id=validate_segment_id(params.get("segmentId")),
            keyword=sanitize_keyword(params.get("keyword")),
            start_date_time=validate_datetime(params.get("startDateTime")),
            end_date_time=validate_datetime(params.get("endDateTime")),
            price_range=validate_price_range(params.get("priceRange")),
        )

    def to_upstream_params(self, api_key: Optional[str], city: str, country_code: str) -> List[Tuple[str, str]]:
        """Render the Ticketmaster query string parameters, in order.

        The upstream API pages from 1 while callers page from 0.
        """
        params: List[Tuple[str, str]] = [
            ("apikey", api_key or ""),
            ("size", str(self.size)),
            ("page", str(self.page + 1)),
            ("city", city),
            ("countryCode", country_code),
            ("sort", "date,asc"),
            ("locale", "*"),
        ]

        optional = (
            ("segmentId", self.segment_id),
            ("keyword", self.keyword),
            ("startDateTime", self.start_date_time),
            ("endDateTime", self.end_date_time),
            ("priceRange", self.price_range),
        )
        params.extend((name, value) for name, value in optional if value)

        params.extend([
            ("includeFamily", "yes"),
            ("includeTBA", "no"),
            ("includeTBD", "no"),
        ])
        return params


def reshape_events(payload: Mapping[str, Any], query: EventSearchQuery) -> Dict[str, Any]:
    """Reshape an upstream payload into the listing the front-end expects.

    ``page.number`` echoes the caller's 0-based page, not the upstream one.
    A payload without ``_embedded`` (no results) becomes an empty list.
    """
    embedded = payload.get("_embedded") or {}
    upstream_page = payload.get("page") or {}

    listing = EventsListing(
        _embedded={"events": list(embedded.get("events") or [])},
        page=EventsPage(
            size=query.size,
            totalElements=upstream_page.get("totalElements") or 0,
            totalPages=upstream_page.get("totalPages") or 0,
            number=query.page,
        ),
    )
    return listing.model_dump(by_alias=True)
