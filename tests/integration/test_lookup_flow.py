"""End-to-end resolution tests with a real cache and a real SQLite store.

Only the remote registry is mocked.  A mutable clock drives the freshness
window so the tests can age stored records without sleeping.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi import FastAPI

from src.api.middleware import ErrorHandlingMiddleware
from src.api.routes import router as api_router
from src.models.ifsc import IFSCDetails, ResolutionSource
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.ifsc.registry import IFSCProviderRegistry
from src.providers.store.sqlite_record_store import SQLiteRecordStore
from src.services.ifsc_service import IFSCService
from src.utils.errors import IFSCNotFoundError, ProviderUnavailableError

_CODE = "HDFC0CAGSBK"


class _Clock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock(fixed_now: datetime) -> _Clock:
    return _Clock(fixed_now)


@pytest.fixture
def cache() -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=100, ttl=300)


@pytest.fixture
async def store(tmp_path: Path) -> SQLiteRecordStore:
    s = SQLiteRecordStore(db_path=tmp_path / "ifsc.db")
    await s.initialize()
    return s


@pytest.fixture
def service(
    cache: MemoryCacheProvider,
    store: SQLiteRecordStore,
    provider_registry: IFSCProviderRegistry,
    clock: _Clock,
) -> IFSCService:
    return IFSCService(
        cache=cache,
        store=store,
        providers=provider_registry,
        freshness_days=30,
        clock=clock,
    )


async def test_cold_lookup_populates_store_and_cache(
    service: IFSCService,
    cache: MemoryCacheProvider,
    store: SQLiteRecordStore,
    mock_provider: MagicMock,
    sample_details: IFSCDetails,
    fixed_now: datetime,
) -> None:
    result = await service.resolve(_CODE)

    assert result.source is ResolutionSource.REMOTE
    stored = await store.get(_CODE)
    assert stored is not None
    assert stored.details == sample_details
    assert stored.last_updated == fixed_now
    assert await cache.exists(f"ifsc:{_CODE}")

    again = await service.resolve(_CODE)
    assert again == result
    assert mock_provider.fetch_ifsc_details.await_count == 1


async def test_fresh_store_hit_after_cache_expiry(
    service: IFSCService,
    cache: MemoryCacheProvider,
    mock_provider: MagicMock,
    clock: _Clock,
) -> None:
    await service.resolve(_CODE)
    await cache.delete(f"ifsc:{_CODE}")
    clock.now += timedelta(days=10)

    result = await service.resolve(_CODE)

    assert result.source is ResolutionSource.STORE
    assert mock_provider.fetch_ifsc_details.await_count == 1


async def test_stale_record_served_during_outage(
    service: IFSCService,
    cache: MemoryCacheProvider,
    store: SQLiteRecordStore,
    mock_provider: MagicMock,
    clock: _Clock,
    fixed_now: datetime,
) -> None:
    await service.resolve(_CODE)
    await cache.delete(f"ifsc:{_CODE}")
    clock.now += timedelta(days=35)
    mock_provider.fetch_ifsc_details.side_effect = ProviderUnavailableError(
        "Read timed out", "razorpay"
    )

    result = await service.resolve(_CODE)

    assert result.source is ResolutionSource.STORE
    assert result.last_updated == fixed_now
    stored = await store.get(_CODE)
    assert stored is not None
    assert stored.last_updated == fixed_now


async def test_stale_record_refreshed_when_provider_recovers(
    service: IFSCService,
    cache: MemoryCacheProvider,
    store: SQLiteRecordStore,
    mock_provider: MagicMock,
    sample_details: IFSCDetails,
    clock: _Clock,
) -> None:
    await service.resolve(_CODE)
    await cache.delete(f"ifsc:{_CODE}")
    clock.now += timedelta(days=35)
    renamed = sample_details.model_copy(update={"branch": "CV RAMAN NAGAR"})
    mock_provider.fetch_ifsc_details.return_value = renamed

    result = await service.resolve(_CODE)

    assert result.source is ResolutionSource.REMOTE
    assert result.details.branch == "CV RAMAN NAGAR"
    stored = await store.get(_CODE)
    assert stored is not None
    assert stored.last_updated == clock.now
    assert await store.count() == 1


async def test_mismatched_provider_code_still_backs_fallback(
    service: IFSCService,
    cache: MemoryCacheProvider,
    store: SQLiteRecordStore,
    mock_provider: MagicMock,
    sample_details: IFSCDetails,
    clock: _Clock,
) -> None:
    mock_provider.fetch_ifsc_details.return_value = sample_details.model_copy(
        update={"ifsc": "HDFC0000001"}
    )
    await service.resolve(_CODE)

    assert await store.get("HDFC0000001") is None
    stored = await store.get(_CODE)
    assert stored is not None
    assert stored.details.ifsc == _CODE

    await cache.delete(f"ifsc:{_CODE}")
    clock.now += timedelta(days=35)
    mock_provider.fetch_ifsc_details.side_effect = ProviderUnavailableError(
        "Read timed out", "razorpay"
    )

    result = await service.resolve(_CODE)

    assert result.source is ResolutionSource.STORE
    assert result.details.branch == sample_details.branch


async def test_unknown_code_leaves_no_trace(
    service: IFSCService,
    cache: MemoryCacheProvider,
    store: SQLiteRecordStore,
    mock_provider: MagicMock,
) -> None:
    mock_provider.fetch_ifsc_details.side_effect = IFSCNotFoundError("SBIN0999999", "razorpay")

    with pytest.raises(IFSCNotFoundError):
        await service.resolve("SBIN0999999")

    assert await store.get("SBIN0999999") is None
    assert not await cache.exists("ifsc:SBIN0999999")


async def test_stats_follow_the_clock(
    service: IFSCService,
    store: SQLiteRecordStore,
    sample_details: IFSCDetails,
    fixed_now: datetime,
    clock: _Clock,
) -> None:
    await store.upsert(sample_details, last_updated=fixed_now)
    other = IFSCDetails.model_validate({"IFSC": "SBIN0000001", "BANK": "State Bank of India"})
    await store.upsert(other, last_updated=fixed_now - timedelta(days=40))

    stats = await service.get_stats()
    assert (stats.total_records, stats.fresh_records, stats.stale_records) == (2, 1, 1)

    clock.now += timedelta(days=31)
    stats = await service.get_stats()
    assert (stats.total_records, stats.fresh_records, stats.stale_records) == (2, 0, 2)


async def test_record_at_window_edge_is_stale_everywhere(
    service: IFSCService,
    store: SQLiteRecordStore,
    mock_provider: MagicMock,
    sample_details: IFSCDetails,
    fixed_now: datetime,
) -> None:
    await store.upsert(sample_details, last_updated=fixed_now - timedelta(days=30))

    stats = await service.get_stats()
    assert (stats.fresh_records, stats.stale_records) == (0, 1)

    result = await service.resolve(_CODE)
    assert result.source is ResolutionSource.REMOTE
    mock_provider.fetch_ifsc_details.assert_awaited_once_with(_CODE)


async def test_http_round_trip(
    service: IFSCService, provider_registry: IFSCProviderRegistry
) -> None:
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.include_router(api_router)
    app.state.ifsc_service = service
    app.state.provider_registry = provider_registry

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        first = await client.get("/api/v1/ifsc/hdfc0cagsbk")
        second = await client.get("/api/v1/ifsc/HDFC0CAGSBK")
        bad = await client.get("/api/v1/ifsc/INVALID123")

    assert first.status_code == 200
    assert first.json()["source"] == "remote"
    assert second.json() == first.json()
    assert bad.status_code == 400
