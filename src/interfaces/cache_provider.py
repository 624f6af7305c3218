"""Abstract base class for cache service providers.

Defines the contract for the key-value cache that fronts every IFSC lookup.
Implementations may use an in-memory dict, Redis, or any other storage
backend.  The adapter pattern allows the cache backend to be swapped
without touching the resolution engine.

The cache is **best-effort**: a backend failure must never fail the caller.
Implementations log the failure and report a miss (``get``), drop the
write (``set``), or return ``False`` (``exists``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


def make_cache_key(prefix: str, identifier: str) -> str:
    """Build a namespaced cache key, e.g. ``ifsc:HDFC0CAGSBK``."""
    return f"{prefix}:{identifier}"


class ICacheProvider(ABC):
    """Contract for key-value cache services.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.  Values are JSON-compatible structures
    (dicts of strings, numbers, and booleans).
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise,
            including when the backend is unreachable.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key* with an optional time-to-live.

        Parameters
        ----------
        key:
            The cache key.
        value:
            A JSON-compatible value.
        ttl:
            Time-to-live in seconds.  ``None`` means the provider's
            configured default TTL.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key*.

        This is a no-op if the key does not exist.
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this cache backend."""

    async def initialize(self) -> None:
        """Connect to the backend.  Called once at startup.

        Network-backed caches raise
        :class:`~src.utils.errors.ConfigurationError` here when the
        backend is unreachable so the process fails fast.
        """

    async def close(self) -> None:
        """Release backend connections.  Called once at shutdown."""
