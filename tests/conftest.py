"""Shared pytest fixtures for the IFSC lookup service test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.ifsc_provider import IIFSCProvider
from src.interfaces.record_store import IRecordStore
from src.models.ifsc import IFSCDetails
from src.providers.ifsc.registry import IFSCProviderRegistry

# Fixed "now" used by every time-sensitive test.
FIXED_NOW = datetime(2025, 1, 31, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Payloads and records
# ---------------------------------------------------------------------------


@pytest.fixture
def razorpay_payload() -> dict[str, Any]:
    """A complete registry response for HDFC0CAGSBK, as Razorpay returns it."""
    return {
        "BANK": "HDFC Bank",
        "IFSC": "HDFC0CAGSBK",
        "BRANCH": "KAGGADASAPURA",
        "CENTRE": "BANGALORE URBAN",
        "DISTRICT": "BANGALORE URBAN",
        "STATE": "KARNATAKA",
        "ADDRESS": "HDFC BANK LTD, NO.6/1, KAGGADASAPURA MAIN ROAD, BANGALORE",
        "CONTACT": "+918061606161",
        "IMPS": True,
        "RTGS": True,
        "CITY": "BANGALORE",
        "ISO3166": "IN-KA",
        "NEFT": True,
        "MICR": "560240033",
        "SWIFT": "HDFCINBB",
        "UPI": True,
        "BANKCODE": "HDFC",
    }


@pytest.fixture
def sample_details(razorpay_payload: dict[str, Any]) -> IFSCDetails:
    payload = {k: v for k, v in razorpay_payload.items() if k != "BANKCODE"}
    return IFSCDetails.model_validate(payload)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


# ---------------------------------------------------------------------------
# Mocked collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_cache() -> MagicMock:
    """An empty cache: every ``get`` misses."""
    cache = MagicMock(spec=ICacheProvider)
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock()
    cache.exists = AsyncMock(return_value=False)
    cache.get_provider_name.return_value = "mock_cache"
    return cache


@pytest.fixture
def mock_store() -> MagicMock:
    """An empty store that echoes upserts back."""
    store = MagicMock(spec=IRecordStore)
    store.get = AsyncMock(return_value=None)
    store.upsert = AsyncMock()
    store.count = AsyncMock(return_value=0)
    store.count_updated_since = AsyncMock(return_value=0)
    store.get_provider_name.return_value = "mock_store"
    return store


@pytest.fixture
def mock_provider(sample_details: IFSCDetails) -> MagicMock:
    """A provider that returns ``sample_details`` for every code."""
    provider = MagicMock(spec=IIFSCProvider)
    provider.fetch_ifsc_details = AsyncMock(return_value=sample_details)
    provider.get_provider_name.return_value = "razorpay"
    provider.aclose = AsyncMock()
    return provider


@pytest.fixture
def provider_registry(mock_provider: MagicMock) -> IFSCProviderRegistry:
    return IFSCProviderRegistry([mock_provider], default="razorpay")
