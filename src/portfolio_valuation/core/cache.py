"""In-memory TTL cache for upstream market data."""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """Cached value with an absolute expiry on the cache clock."""

    value: T
    expires_at: float


class TTLCache(Generic[T]):
    """
    Key -> value store with per-entry absolute expiry.

    An entry is visible while ``now <= expires_at``. Expired entries are
    removed lazily when read, or eagerly by ``cleanup()``. There is no size
    bound; the key space is bounded by the portfolio.

    All access goes through a single lock so the cache can be shared by
    concurrent request handlers and the background sweeper.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: T, ttl_seconds: float) -> None:
        """Store value, replacing any existing entry for key."""
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl_seconds)

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._live_entry(key)
            return entry.value if entry is not None else None

    def has(self, key: str) -> bool:
        """Check whether an unexpired entry exists for key."""
        with self._lock:
            return self._live_entry(key) is not None

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Entry count, including expired entries not yet swept."""
        with self._lock:
            return len(self._entries)

    def cleanup(self) -> int:
        """Evict every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def _live_entry(self, key: str) -> Optional[CacheEntry[T]]:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry
