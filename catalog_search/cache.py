# catalog_search/cache.py
"""Small in-process key-value cache with TTL eviction."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger("catalog_search.cache")


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class ExpiringCache:
    """Entries live for ``ttl`` seconds; expired entries are evicted on access.

    ``get_or_load`` is the refresh path: a miss or an expired entry calls the
    loader and stores its result. ``invalidate`` drops every key matching a
    predicate, which callers use when the underlying data changes. A load that
    overlaps an invalidation is returned to its caller but not stored.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()
        self._generation = 0

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired(self._clock())
            return len(self._entries)

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Evicted %d expired cache entries", len(expired))

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value, self._clock() + self.ttl)

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is not None:
            return value
        with self._lock:
            generation = self._generation
        value = loader()
        with self._lock:
            if generation == self._generation:
                self._entries[key] = CacheEntry(value, self._clock() + self.ttl)
            else:
                logger.debug("Discarding load of %r, cache invalidated meanwhile", key)
        return value

    def invalidate(self, predicate: Callable[[Hashable], bool]) -> int:
        with self._lock:
            doomed = [k for k in self._entries if predicate(k)]
            self._generation += 1
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generation += 1
