"""Public interface definitions for all external service providers.

Every external service the IFSC lookup service talks to is accessed
exclusively through the abstract base classes defined in this package.
Concrete adapters implement these interfaces and are injected at startup.

ADAPTER PATTERN:
    The resolution engine calls ``cache.get(...)``, ``store.get(...)`` and
    ``provider.fetch_ifsc_details(...)`` on whatever objects it was
    constructed with.  This means:
        - Swapping the in-memory cache for Redis is a configuration change
          in main.py, not a change to the engine.
        - Unit tests inject mock providers without real network calls.
        - Additional IFSC registries can be added to the provider table
          without touching business logic.

CONCRETE PROVIDER MAP:
    Interface        →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────
    ICacheProvider   →  MemoryCacheProvider, RedisCacheProvider
    IRecordStore     →  SQLiteRecordStore
    IIFSCProvider    →  RazorpayIFSCProvider
"""

from src.interfaces.cache_provider import ICacheProvider, make_cache_key
from src.interfaces.ifsc_provider import IIFSCProvider
from src.interfaces.record_store import IRecordStore

__all__ = [
    "ICacheProvider",
    "IIFSCProvider",
    "IRecordStore",
    "make_cache_key",
]
