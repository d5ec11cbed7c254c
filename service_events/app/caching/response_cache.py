"""
Process-local response cache for the events proxy.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from shared.logging import get_logger


DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ENTRIES = 1024


@dataclass
class CacheEntry:
    payload: Any
    stored_at: float


class ResponseCache:
    """Bounded time-indexed cache keyed by the inbound request URL.

    Entries older than ``ttl_seconds`` are never returned. Expired entries are
    purged when read, and swept from the whole map before anything is evicted
    for capacity. When still full, the oldest stored entry is evicted.

    The clock is injectable so tests can advance time without sleeping.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock
        self.logger = get_logger("events.cache")

        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._is_expired(entry, self.clock())

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload for key, or None on miss or expiry."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if self._is_expired(entry, self.clock()):
            del self._entries[key]
            self._misses += 1
            self.logger.debug("Cache entry expired", key=key)
            return None

        self._hits += 1
        return entry.payload

    def set(self, key: str, payload: Any) -> None:
        """Store payload under key, replacing any prior entry."""
        now = self.clock()
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self.purge_expired(now)
            while len(self._entries) >= self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self._evictions += 1
                self.logger.debug("Cache entry evicted", key=evicted_key)

        self._entries[key] = CacheEntry(payload=payload, stored_at=now)

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Drop every expired entry; return how many were removed."""
        now = self.clock() if now is None else now
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_entries": self.max_entries,
            "ttl_seconds": self.ttl_seconds,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_ratio": round(self._hits / total, 4) if total else 0.0,
        }
