"""Caches for resolved grammar imports."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class GrammarCache(Protocol):
    """Key/value cache the resolver reads from and writes to.

    Implementations must tolerate concurrent ``get``/``put`` calls from
    independent resolution runs.
    """

    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any) -> None: ...


@dataclass
class CacheEntry:
    """Cached value with its expiry time."""

    value: Any
    expires_at: float | None = None
    hits: int = 0
    created_at: float = field(default_factory=time.monotonic)

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class InMemoryGrammarCache:
    """Thread-safe LRU cache with an optional time-to-live."""

    def __init__(
        self,
        max_size: int = 256,
        ttl_seconds: float = 0,
        clock=time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries before the least recently
                used one is evicted.
            ttl_seconds: Seconds an entry stays valid; 0 disables expiry.
            clock: Monotonic time source, replaceable in tests.

        """
        if max_size <= 0:
            msg = f"max_size must be > 0, got {max_size}"
            raise ValueError(msg)

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0, "puts": 0, "evictions": 0, "expirations": 0}

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self._clock()):
                del self._entries[key]
                self._stats["expirations"] += 1
                entry = None

            if entry is None:
                self._stats["misses"] += 1
                logger.debug("Cache miss: %s", key[:16])
                return None

            entry.hits += 1
            self._entries.move_to_end(key)
            self._stats["hits"] += 1
            logger.debug("Cache hit: %s", key[:16])
            return entry.value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            expires_at = now + self.ttl_seconds if self.ttl_seconds > 0 else None
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at, created_at=now)
            self._entries.move_to_end(key)
            self._stats["puts"] += 1

            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._stats["evictions"] += 1
                logger.debug("Cache evicted: %s", evicted[:16])

    def invalidate(self, key: str) -> bool:
        """Remove a single entry. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Cleared grammar cache")

    def stats(self) -> dict:
        """Get hit/miss statistics."""
        with self._lock:
            lookups = self._stats["hits"] + self._stats["misses"]
            return {
                **self._stats,
                "size": len(self._entries),
                "max_size": self.max_size,
                "hit_rate": self._stats["hits"] / lookups if lookups else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())


class NullCache:
    """Cache that stores nothing, used when caching is disabled."""

    def get(self, key: str) -> Any | None:
        return None

    def put(self, key: str, value: Any) -> None:
        return None


def create_cache(config) -> GrammarCache:
    """Build the cache described by a ResolverConfig."""
    if not config.cache_enabled:
        logger.info("Resolved-import caching is disabled")
        return NullCache()
    return InMemoryGrammarCache(
        max_size=config.cache_max_size,
        ttl_seconds=config.cache_ttl_seconds,
    )
