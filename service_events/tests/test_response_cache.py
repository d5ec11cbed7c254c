"""
Unit tests for the events proxy response cache.
"""

import pytest

from service_events.app.caching.response_cache import ResponseCache


class TestResponseCache:
    """Test cases for ResponseCache."""

    def test_miss_then_hit(self, cache):
        assert cache.get("/api/events?size=5") is None

        cache.set("/api/events?size=5", {"events": [1]})

        assert cache.get("/api/events?size=5") == {"events": [1]}
        assert cache.stats()["hits"] == 1
        assert cache.stats()["misses"] == 1

    def test_entry_served_until_ttl_then_purged(self, cache, clock):
        cache.set("k", {"v": 1})

        clock.advance(299)
        assert cache.get("k") == {"v": 1}

        clock.advance(1)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_set_overwrites_and_refreshes_timestamp(self, cache, clock):
        cache.set("k", {"v": 1})
        clock.advance(200)
        cache.set("k", {"v": 2})
        clock.advance(200)

        assert cache.get("k") == {"v": 2}
        assert len(cache) == 1

    def test_keys_are_exact_urls(self, cache):
        cache.set("/api/events?size=5&page=0", {"v": 1})

        assert cache.get("/api/events?page=0&size=5") is None

    def test_capacity_evicts_oldest(self, clock):
        cache = ResponseCache(ttl_seconds=300, max_entries=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert "a" not in cache
        assert cache.get("b") == 2
        assert cache.get("c") == 3
        assert cache.stats()["evictions"] == 1

    def test_expired_entries_swept_before_eviction(self, clock):
        cache = ResponseCache(ttl_seconds=10, max_entries=2, clock=clock)
        cache.set("old", 1)
        clock.advance(5)
        cache.set("fresh", 2)
        clock.advance(6)

        cache.set("new", 3)

        assert cache.get("fresh") == 2
        assert cache.get("new") == 3
        assert cache.stats()["evictions"] == 0

    def test_purge_expired(self, cache, clock):
        cache.set("a", 1)
        clock.advance(100)
        cache.set("b", 2)
        clock.advance(250)

        assert cache.purge_expired() == 1
        assert "b" in cache

    def test_clear(self, cache):
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize("kwargs", [{"ttl_seconds": 0}, {"max_entries": 0}])
    def test_rejects_invalid_bounds(self, kwargs):
        with pytest.raises(ValueError):
            ResponseCache(**kwargs)
