"""
Tests for the shared structured logging setup.
"""

import json
import logging
from datetime import datetime

import structlog

from shared.logging import clear_context, configure_logging, set_request_id


def _render(logger_name: str, event: str) -> dict:
    """Run an event through the configured processor chain."""
    logger = logging.getLogger(logger_name)
    event_dict = {"event": event}
    for processor in structlog.get_config()["processors"]:
        event_dict = processor(logger, "error", event_dict)
    return json.loads(event_dict)


def test_timestamp_is_iso_8601():
    configure_logging("events")

    record = _render("events.cache", "Cache purged")

    assert isinstance(record["timestamp"], str)
    assert datetime.fromisoformat(record["timestamp"].replace("Z", "+00:00"))
    assert record["service"] == "events"
    assert record["level"] == "error"


def test_request_id_is_attached():
    configure_logging("events")
    set_request_id("req-42")
    try:
        record = _render("events.subscriptions", "Subscriber saved")
    finally:
        clear_context()

    assert record["request_id"] == "req-42"
