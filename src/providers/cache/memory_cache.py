"""In-memory cache provider using cachetools.TLRUCache.

Simple, fast cache suitable for development and single-process deployments.
Can be swapped for Redis via the ICacheProvider interface.
"""

from __future__ import annotations

import time
from typing import Any, Callable, NamedTuple

import structlog
from cachetools import TLRUCache

from src.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCacheProvider(ICacheProvider):
    """In-memory TTL cache backed by ``cachetools.TLRUCache``.

    Unlike a plain ``TTLCache``, every entry carries its own expiry, so
    ``set(..., ttl=60)`` and ``set(..., ttl=None)`` can coexist.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted.
    ttl:
        Default time-to-live in seconds for entries stored without an
        explicit ``ttl``.
    timer:
        Clock used for expiry.  Tests pass a fake clock.
    """

    def __init__(
        self,
        max_size: int = 10_000,
        ttl: int = 300,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = ttl
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=max_size, ttu=_time_to_use, timer=timer
        )

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        entry = self._cache.get(key)
        if entry is None:
            logger.debug("cache_miss", key=key)
            return None
        logger.debug("cache_hit", key=key)
        return entry.value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key* for *ttl* seconds (default TTL if ``None``)."""
        effective_ttl = ttl if ttl is not None else self._default_ttl
        self._cache[key] = _Entry(value=value, ttl=effective_ttl)
        logger.debug("cache_set", key=key, ttl=effective_ttl)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        self._cache.pop(key, None)
        logger.debug("cache_delete", key=key)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
        return key in self._cache

    def get_provider_name(self) -> str:
        return "memory_cache"
