"""
Shared fixtures and collaborator doubles for events service tests.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Any, Dict, List, Optional, Tuple

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.config import ServiceConfig
from shared.errors import NotificationError
from service_events.app.adapters.subscriber_store import InMemorySubscriberStore
from service_events.app.caching.response_cache import ResponseCache
from service_events.app.main import EventsService


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeEventsClient:
    """Events API double that records every search."""

    def __init__(self, payload: Optional[Dict[str, Any]] = None):
        self.payload = payload
        self.error: Optional[Exception] = None
        self.calls: List[List[Tuple[str, str]]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def search_events(self, params):
        self.calls.append(list(params))
        if self.error is not None:
            raise self.error
        return self.payload


class RecordingMailer:
    """Mailer double that records confirmations instead of sending them."""

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []
        self.fail = False

    async def send_confirmation(self, to: str, event_url: str) -> None:
        if self.fail:
            raise NotificationError(details="Failed to send email")
        self.sent.append((to, event_url))


@pytest.fixture
def upstream_payload():
    """Representative Ticketmaster search payload."""
    return {
        "_embedded": {
            "events": [
                {"id": "E1", "name": "Harbour Lights", "url": "https://tm.example/E1"},
                {"id": "E2", "name": "Opera Gala", "url": "https://tm.example/E2"},
            ]
        },
        "page": {"size": 12, "totalElements": 2, "totalPages": 1, "number": 1},
    }


@pytest.fixture
def config(tmp_path):
    """Service configuration isolated from the host environment."""
    return ServiceConfig(
        service_name="events",
        env="test",
        ticketmaster_api_key="test-key",
        static_dir=str(tmp_path),
        events_cache_ttl_seconds=300,
        events_cache_max_entries=16,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemorySubscriberStore()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def events_client(upstream_payload):
    return FakeEventsClient(upstream_payload)


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_seconds=300, max_entries=16, clock=clock)


@pytest.fixture
def service(config, store, events_client, mailer, cache):
    """EventsService wired to in-process doubles."""
    return EventsService(
        config,
        store=store,
        events_client=events_client,
        mailer=mailer,
        cache=cache,
    )


@pytest.fixture
def client(service):
    """Create test client."""
    return TestClient(service.app)
