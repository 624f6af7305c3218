"""Unit tests for MemoryCacheProvider and RedisCacheProvider."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.interfaces.cache_provider import make_cache_key
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider
from src.utils.errors import ConfigurationError


class _FakeTimer:
    """Monotonic clock advanced by hand."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_make_cache_key() -> None:
    assert make_cache_key("ifsc", "HDFC0CAGSBK") == "ifsc:HDFC0CAGSBK"


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.fixture()
    def timer(self) -> _FakeTimer:
        return _FakeTimer()

    @pytest.fixture()
    def cache(self, timer: _FakeTimer) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=100, ttl=300, timer=timer)

    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("nonexistent") is None

    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("ifsc:HDFC0CAGSBK", {"ifsc": "HDFC0CAGSBK"})
        assert await cache.get("ifsc:HDFC0CAGSBK") == {"ifsc": "HDFC0CAGSBK"}

    async def test_set_overwrites_existing(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "old")
        await cache.set("key1", "new")
        assert await cache.get("key1") == "new"

    async def test_default_ttl_expires_entry(
        self, cache: MemoryCacheProvider, timer: _FakeTimer
    ) -> None:
        await cache.set("key1", "value1")
        timer.now += 299
        assert await cache.get("key1") == "value1"
        timer.now += 2
        assert await cache.get("key1") is None

    async def test_per_entry_ttl(self, cache: MemoryCacheProvider, timer: _FakeTimer) -> None:
        await cache.set("short", "a", ttl=10)
        await cache.set("long", "b")
        timer.now += 11
        assert await cache.get("short") is None
        assert await cache.get("long") == "b"

    async def test_delete_removes_key(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "value1")
        await cache.delete("key1")
        assert await cache.get("key1") is None

    async def test_delete_nonexistent_is_noop(self, cache: MemoryCacheProvider) -> None:
        await cache.delete("nonexistent")

    async def test_exists_tracks_expiry(
        self, cache: MemoryCacheProvider, timer: _FakeTimer
    ) -> None:
        await cache.set("key1", "value1", ttl=5)
        assert await cache.exists("key1") is True
        timer.now += 6
        assert await cache.exists("key1") is False

    async def test_max_size_evicts(self, timer: _FakeTimer) -> None:
        cache = MemoryCacheProvider(max_size=2, ttl=300, timer=timer)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.set("c", 3)
        present = [k for k in ("a", "b", "c") if await cache.exists(k)]
        assert len(present) == 2
        assert "c" in present

    def test_provider_name(self, cache: MemoryCacheProvider) -> None:
        assert cache.get_provider_name() == "memory_cache"


# ======================================================================
# RedisCacheProvider
# ======================================================================


class TestRedisCacheProvider:
    @pytest.fixture()
    def client(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def cache(self, client: AsyncMock) -> RedisCacheProvider:
        return RedisCacheProvider(ttl=300, client=client)

    async def test_initialize_pings(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        await cache.initialize()
        client.ping.assert_awaited_once()

    async def test_initialize_unreachable_raises_configuration_error(
        self, cache: RedisCacheProvider, client: AsyncMock
    ) -> None:
        client.ping.side_effect = RedisConnectionError("Connection refused")
        with pytest.raises(ConfigurationError) as exc_info:
            await cache.initialize()
        assert exc_info.value.provider_name == "redis_cache"

    async def test_get_decodes_json(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        client.get.return_value = json.dumps({"ifsc": "HDFC0CAGSBK"})
        assert await cache.get("ifsc:HDFC0CAGSBK") == {"ifsc": "HDFC0CAGSBK"}

    async def test_get_miss(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        client.get.return_value = None
        assert await cache.get("ifsc:HDFC0CAGSBK") is None

    async def test_get_error_is_a_miss(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        client.get.side_effect = RedisConnectionError("down")
        assert await cache.get("ifsc:HDFC0CAGSBK") is None

    async def test_get_undecodable_is_a_miss(
        self, cache: RedisCacheProvider, client: AsyncMock
    ) -> None:
        client.get.return_value = "{not json"
        assert await cache.get("ifsc:HDFC0CAGSBK") is None

    async def test_set_uses_default_ttl(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        await cache.set("k", {"a": 1})
        client.set.assert_awaited_once_with("k", json.dumps({"a": 1}), ex=300)

    async def test_set_explicit_ttl(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        await cache.set("k", "v", ttl=60)
        client.set.assert_awaited_once_with("k", json.dumps("v"), ex=60)

    async def test_set_error_is_swallowed(
        self, cache: RedisCacheProvider, client: AsyncMock
    ) -> None:
        client.set.side_effect = RedisConnectionError("down")
        await cache.set("k", "v")

    async def test_set_unserializable_value_is_dropped(
        self, cache: RedisCacheProvider, client: AsyncMock
    ) -> None:
        await cache.set("k", object())
        client.set.assert_not_awaited()

    async def test_exists(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        client.exists.return_value = 1
        assert await cache.exists("k") is True
        client.exists.return_value = 0
        assert await cache.exists("k") is False

    async def test_exists_error_returns_false(
        self, cache: RedisCacheProvider, client: AsyncMock
    ) -> None:
        client.exists.side_effect = RedisConnectionError("down")
        assert await cache.exists("k") is False

    async def test_delete_error_is_swallowed(
        self, cache: RedisCacheProvider, client: AsyncMock
    ) -> None:
        client.delete.side_effect = RedisConnectionError("down")
        await cache.delete("k")

    async def test_close(self, cache: RedisCacheProvider, client: AsyncMock) -> None:
        await cache.close()
        client.aclose.assert_awaited_once()
