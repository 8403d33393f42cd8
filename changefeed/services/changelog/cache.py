"""
TTL cache for assembled changelog feeds.

Entries are keyed by the request's (window, limit, cursor) triple. Expired
entries are evicted lazily, only when that exact key is read again; there is
no sweep and no size bound, the key space being limited by the clamped query
parameters.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 60.0


@dataclass
class CacheEntry(Generic[T]):
    """Cached payload and the clock reading at which it expires."""

    payload: T
    expires_at: float


class ResponseCache(Generic[T]):
    """
    Process-local TTL cache with an injectable clock.

    Usage:
        cache = ResponseCache(ttl_seconds=60)
        key = ResponseCache.make_key(30, 20, None)
        if (payload := cache.get(key)) is None:
            payload = await build()
            cache.set(key, payload)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    @staticmethod
    def make_key(window_days: int, limit: int, cursor: str | None) -> str:
        """Stable string key for a query-parameter triple."""
        return f"{window_days}|{limit}|{cursor or ''}"

    def get(self, key: str) -> T | None:
        """Return the cached payload, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache MISS: {key}")
            return None

        if entry.expires_at <= self._clock():
            del self._entries[key]
            logger.debug(f"Cache EXPIRED: {key}")
            return None

        logger.debug(f"Cache HIT: {key}")
        return entry.payload

    def set(self, key: str, payload: T) -> None:
        """Store a payload, expiring ttl_seconds from now."""
        self._entries[key] = CacheEntry(payload=payload, expires_at=self._clock() + self.ttl_seconds)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
