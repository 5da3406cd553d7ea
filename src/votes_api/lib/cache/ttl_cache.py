"""TTL-based in-memory cache.

Stores values per key with a fixed time-to-live. Expired entries are
evicted lazily, on the first read after expiry; there is no background
sweep and no capacity bound since the key set is small and fixed
(upstream URLs and a handful of derived list names).
"""

import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

from loguru import logger

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A cached value and the monotonic time at which it expires."""

    value: V
    expires_at: float


class TTLCache(Generic[V]):
    """Per-key cache with time-based expiration.

    Values are stored as-is; callers must treat them as immutable
    snapshots once cached.

    Args:
        ttl_seconds: Time-to-live applied to every entry.
        clock: Monotonic time source in seconds. Injectable for tests.
        name: Label used in log messages.
    """

    def __init__(
        self,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        if ttl_seconds < 0:
            msg = f"ttl_seconds must be non-negative, got {ttl_seconds}"
            raise ValueError(msg)
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._name = name
        self._entries: dict[Hashable, CacheEntry[V]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        """Time-to-live applied to new entries."""
        return self._ttl_seconds

    def get(self, key: Hashable) -> V | None:
        """Return the cached value for ``key`` if it has not expired.

        An expired entry is removed as a side effect.

        Args:
            key: Cache key.

        Returns:
            The cached value, or None on a miss or after expiry.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                logger.debug("{} entry expired: {}", self._name, key)
                return None
            return entry.value

    def set(self, key: Hashable, value: V) -> None:
        """Store ``value`` under ``key``, replacing any existing entry.

        Args:
            key: Cache key.
            value: Value to cache.
        """
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + self._ttl_seconds)

    def invalidate(self, key: Hashable | None = None) -> None:
        """Drop one entry, or every entry when ``key`` is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self._clock() < entry.expires_at

    def __len__(self) -> int:
        # Counts expired-but-unread entries too.
        with self._lock:
            return len(self._entries)
