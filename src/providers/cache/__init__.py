"""Cache providers.

TTL cache that fronts every IFSC lookup so repeated requests for the same
code never reach the store or the remote registry while the entry lives.

MemoryCacheProvider is a in-process TLRU cache and is not shared
across workers.  RedisCacheProvider is shared across workers; select it with
``CACHE_BACKEND=redis``.
"""

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider

__all__ = ["MemoryCacheProvider", "RedisCacheProvider"]
