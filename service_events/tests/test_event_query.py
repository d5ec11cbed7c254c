"""
Unit tests for event-search query validation.
"""

import pytest

from service_events.app.domain.event_query import (
    EventSearchQuery,
    is_valid_iso_datetime,
    parse_leading_int,
    reshape_events,
    sanitize_keyword,
    validate_page,
    validate_size,
)


class TestSizeAndPage:
    """Paging parameters are clamped, never rejected."""

    @pytest.mark.parametrize("raw,expected", [
        (None, 12),
        ("20", 20),
        ("0", 1),
        ("-5", 1),
        ("51", 50),
        ("1000", 50),
        ("abc", 12),
        ("", 12),
        ("25abc", 25),
        ("7.9", 7),
    ])
    def test_size(self, raw, expected):
        assert validate_size(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        (None, 0),
        ("3", 3),
        ("-2", 0),
        ("next", 0),
    ])
    def test_page(self, raw, expected):
        assert validate_page(raw) == expected

    def test_parse_leading_int_ignores_leading_whitespace(self):
        assert parse_leading_int("  +4x") == 4
        assert parse_leading_int("x4") is None


class TestOptionalFilters:
    """Invalid optional filters are dropped."""

    def test_segment_id_alphanumeric_kept(self):
        query = EventSearchQuery.from_params({"segmentId": "ABC123"})
        assert query.segment_id == "ABC123"

    @pytest.mark.parametrize("raw", ["ABC 123", "KZ-FR", "abc;drop", "a.b"])
    def test_segment_id_with_space_or_punctuation_dropped(self, raw):
        query = EventSearchQuery.from_params({"segmentId": raw})
        assert query.segment_id is None

    def test_keyword_trimmed_and_stripped_of_angle_brackets(self):
        assert sanitize_keyword("  <b>jazz</b>  ") == "bjazz/b"

    def test_keyword_empty_after_sanitizing_dropped(self):
        assert sanitize_keyword("  <> ") is None
        assert sanitize_keyword("") is None

    @pytest.mark.parametrize("raw", [
        "2025-03-01T10:00:00",
        "2025-03-01T10:00:00Z",
        "2025-03-01T10:00:00+10:00",
    ])
    def test_valid_datetimes(self, raw):
        assert is_valid_iso_datetime(raw)

    @pytest.mark.parametrize("raw", [
        "2025-03-01",
        "2025-13-01T10:00:00",
        "2025-02-30T10:00:00Z",
        "01/03/2025 10:00",
        "2025-03-01T10:00:00garbage",
    ])
    def test_invalid_datetimes(self, raw):
        assert not is_valid_iso_datetime(raw)

    def test_price_range(self):
        assert EventSearchQuery.from_params({"priceRange": "10-200"}).price_range == "10-200"
        assert EventSearchQuery.from_params({"priceRange": "10 - 200"}).price_range is None
        assert EventSearchQuery.from_params({"priceRange": "cheap"}).price_range is None


class TestUpstreamParams:
    """Rendering of the upstream query string."""

    def test_fixed_parameters_and_order(self):
        query = EventSearchQuery.from_params({"size": "5", "page": "2", "keyword": "rock"})
        params = query.to_upstream_params("secret", "Sydney", "AU")

        assert params == [
            ("apikey", "secret"),
            ("size", "5"),
            ("page", "3"),
            ("city", "Sydney"),
            ("countryCode", "AU"),
            ("sort", "date,asc"),
            ("locale", "*"),
            ("keyword", "rock"),
            ("includeFamily", "yes"),
            ("includeTBA", "no"),
            ("includeTBD", "no"),
        ]

    def test_dropped_filters_are_not_forwarded(self):
        query = EventSearchQuery.from_params({
            "segmentId": "bad id",
            "startDateTime": "tomorrow",
            "priceRange": "free",
        })
        names = [name for name, _ in query.to_upstream_params("k", "Sydney", "AU")]

        assert "segmentId" not in names
        assert "startDateTime" not in names
        assert "priceRange" not in names


class TestReshape:
    """Upstream payload reshaping."""

    def test_reshape_uses_callers_page_number(self, upstream_payload):
        query = EventSearchQuery.from_params({"size": "12", "page": "0"})
        listing = reshape_events(upstream_payload, query)

        assert listing["_embedded"]["events"] == upstream_payload["_embedded"]["events"]
        assert listing["page"] == {
            "size": 12,
            "totalElements": 2,
            "totalPages": 1,
            "number": 0,
        }

    def test_reshape_without_results(self):
        query = EventSearchQuery.from_params({"page": "4"})
        listing = reshape_events({"page": {"totalElements": 0, "totalPages": 0}}, query)

        assert listing["_embedded"] == {"events": []}
        assert listing["page"]["number"] == 4
