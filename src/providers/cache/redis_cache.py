"""Redis cache provider using redis.asyncio.

Shared cache for multi-worker deployments.  Values are JSON-serialized and
written with ``SET key value EX ttl`` so Redis expires them on its own.

Every operation is best-effort: Redis errors are logged and turned into a
miss / dropped write, never raised to the resolution engine.  The only
place a Redis failure surfaces is :meth:`initialize`, which makes startup
fail when the configured Redis is unreachable.
"""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from src.interfaces.cache_provider import ICacheProvider
from src.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_SOCKET_TIMEOUT = 5.0


class RedisCacheProvider(ICacheProvider):
    """Redis-backed TTL cache.

    Parameters
    ----------
    redis_url:
        Connection URL, e.g. ``redis://:secret@localhost:6379/0``.
    ttl:
        Default time-to-live in seconds for entries stored without an
        explicit ``ttl``.
    socket_timeout:
        Upper bound in seconds on connecting and on each command.
    client:
        Pre-built client (tests inject a mock).  When omitted the client is
        created from *redis_url*.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        ttl: int = 300,
        socket_timeout: float = _DEFAULT_SOCKET_TIMEOUT,
        client: redis.Redis | None = None,
    ) -> None:
        self._redis_url = redis_url
        self._default_ttl = ttl
        self._client = client or redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
            retry_on_timeout=True,
            health_check_interval=30,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Ping Redis; raise ConfigurationError if it cannot be reached."""
        try:
            await self._client.ping()
        except (RedisError, OSError) as exc:
            logger.error("redis_unreachable", error=str(exc))
            raise ConfigurationError(
                message=f"Redis cache is unreachable: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("redis_cache_connected")

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("redis_cache_closed")

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Return the decoded value for *key*, or ``None`` on miss or failure."""
        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as exc:
            logger.error("cache_get_failed", key=key, error=str(exc))
            return None

        if raw is None:
            logger.debug("cache_miss", key=key)
            return None

        try:
            value = json.loads(raw)
        except ValueError as exc:
            logger.warning("cache_value_undecodable", key=key, error=str(exc))
            return None

        logger.debug("cache_hit", key=key)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Serialize and store *value*; failures are logged and dropped."""
        expiration = ttl if ttl is not None else self._default_ttl
        try:
            await self._client.set(key, json.dumps(value), ex=expiration)
        except (RedisError, OSError, TypeError, ValueError) as exc:
            logger.error("cache_set_failed", key=key, error=str(exc))
            return
        logger.debug("cache_set", key=key, ttl=expiration)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as exc:
            logger.error("cache_delete_failed", key=key, error=str(exc))

    async def exists(self, key: str) -> bool:
        try:
            return await self._client.exists(key) == 1
        except (RedisError, OSError) as exc:
            logger.error("cache_exists_failed", key=key, error=str(exc))
            return False

    def get_provider_name(self) -> str:
        return "redis_cache"
