"""
In-process read-through cache for the inventory listing.

Entries use absolute expiration: the deadline is fixed when the value is
stored and is never extended by reads. Concurrent misses may each reload
from the store (no single-flight); a load that started before an
``invalidate`` never repopulates the cache.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from core.config import settings

logger = logging.getLogger(__name__)

INVENTORY_LIST_KEY = "inventory:list"


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


@dataclass
class CacheLookup:
    value: Any
    hit: bool
    elapsed_ms: int

    @property
    def status(self) -> str:
        return "HIT" if self.hit else "MISS"


class ReadThroughCache:
    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._generations: Dict[str, int] = {}

    def peek(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> CacheLookup:
        started = time.perf_counter()

        entry = self.peek(key)
        if entry is not None:
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            logger.debug("cache HIT key=%s elapsed_ms=%d", key, elapsed_ms)
            return CacheLookup(value=entry.value, hit=True, elapsed_ms=elapsed_ms)

        generation = self._generations.get(key, 0)
        value = await loader()
        if self._generations.get(key, 0) == generation:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + self.ttl_seconds)
        else:
            logger.debug("cache key=%s invalidated during load; result not stored", key)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.debug("cache MISS key=%s elapsed_ms=%d", key, elapsed_ms)
        return CacheLookup(value=value, hit=False, elapsed_ms=elapsed_ms)

    def invalidate(self, key: str) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1
        if self._entries.pop(key, None) is not None:
            logger.info("cache invalidated key=%s", key)


inventory_cache = ReadThroughCache(ttl_seconds=settings.inventory_cache_ttl_seconds)


def get_inventory_cache() -> ReadThroughCache:
    return inventory_cache
