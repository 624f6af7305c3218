"""IFSC resolution engine.

Resolves a single IFSC code through three tiers, always in this order:

    1. Cache   -- short-lived copy of a previous resolution result
    2. Store   -- durable last-known-good record, trusted while fresh
    3. Provider -- remote registry, refreshed into the store on success

If the provider fails, the last stored record is served regardless of its
age, so a registry outage degrades to stale data instead of an error.
Only when no tier has anything does the caller see an error, and the error
type tells them whether retrying could help (``ProviderUnavailableError``)
or not (``IFSCNotFoundError``).

The engine holds no mutable state between calls and takes no locks; many
requests for the same code may run concurrently and converge through the
store's atomic upsert.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import ValidationError

from src.interfaces.cache_provider import ICacheProvider, make_cache_key
from src.interfaces.record_store import IRecordStore
from src.models.ifsc import (
    IFSCDetails,
    IFSCResponse,
    ResolutionSource,
    StoredRecord,
    StoreStats,
)
from src.providers.ifsc.registry import IFSCProviderRegistry
from src.utils.errors import IFSCNotFoundError, ProviderUnavailableError, StoreError
from src.utils.logging import get_logger


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IFSCService:
    """Cache -> store -> provider resolution with stale-store fallback.

    Parameters
    ----------
    cache:
        Best-effort TTL cache for resolution results.
    store:
        Durable record store.
    providers:
        Provider table; the default entry serves every remote fetch.
    freshness_days:
        A stored record younger than this is served without a remote fetch.
    cache_ttl:
        TTL for cached results.  ``None`` uses the cache's own default.
    key_prefix:
        Namespace for cache keys (``<prefix>:<CODE>``).
    clock:
        Returns the current UTC time.  Injected for deterministic tests.
    """

    def __init__(
        self,
        cache: ICacheProvider,
        store: IRecordStore,
        providers: IFSCProviderRegistry,
        freshness_days: int = 30,
        cache_ttl: int | None = None,
        key_prefix: str = "ifsc",
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._cache = cache
        self._store = store
        self._providers = providers
        self._freshness_days = freshness_days
        self._freshness_window = timedelta(days=freshness_days)
        self._cache_ttl = cache_ttl
        self._key_prefix = key_prefix
        self._clock = clock
        self._logger = get_logger(__name__)

    # -- Public API ----------------------------------------------------------

    async def resolve(self, ifsc_code: str) -> IFSCResponse:
        """Resolve *ifsc_code* to branch metadata.

        The code is expected to have passed the format check already; it
        is only uppercased here.

        Raises
        ------
        IFSCNotFoundError
            No tier has data and the provider reported the code unknown.
        ProviderUnavailableError
            The provider failed and nothing is stored for the code.
        ConfigurationError
            The default provider is not registered.
        """
        code = ifsc_code.strip().upper()
        cache_key = make_cache_key(self._key_prefix, code)

        cached = await self._read_cache(cache_key)
        if cached is not None:
            self._logger.debug("ifsc_resolved", ifsc=code, tier="cache")
            return cached

        now = self._clock()
        stored = await self._read_store(code)
        if stored is not None and stored.is_fresh(now, self._freshness_window):
            result = self._from_store(code, stored)
            await self._write_cache(cache_key, result)
            self._logger.debug("ifsc_resolved", ifsc=code, tier="store")
            return result

        # Resolved outside the fallback below: a misconfigured provider table
        # must surface, not be masked by stale data.
        provider = self._providers.get()

        try:
            details = await provider.fetch_ifsc_details(code)
        except Exception as exc:
            return await self._fallback(code, cache_key, stored, provider.get_provider_name(), exc)

        if details.ifsc != code:
            self._logger.warning(
                "provider_code_mismatch",
                ifsc=code,
                returned=details.ifsc,
                provider=provider.get_provider_name(),
            )
            details = details.model_copy(update={"ifsc": code})

        await self._write_store(details, now)
        result = IFSCResponse(
            ifsc=code,
            details=details,
            source=ResolutionSource.REMOTE,
            last_updated=now,
        )
        await self._write_cache(cache_key, result)
        self._logger.info(
            "ifsc_resolved",
            ifsc=code,
            tier="provider",
            provider=provider.get_provider_name(),
        )
        return result

    async def get_stats(self) -> StoreStats:
        """Summarize store freshness.  Store failures propagate as ``StoreError``."""
        cutoff = self._clock() - self._freshness_window
        total = await self._store.count()
        fresh = await self._store.count_updated_since(cutoff)
        return StoreStats(
            total_records=total,
            fresh_records=fresh,
            stale_records=max(total - fresh, 0),
            freshness_window_days=self._freshness_days,
        )

    # -- Tiers ---------------------------------------------------------------

    async def _read_cache(self, key: str) -> IFSCResponse | None:
        raw = await self._cache.get(key)
        if raw is None:
            return None
        try:
            return IFSCResponse.model_validate(raw)
        except ValidationError as exc:
            self._logger.warning(
                "cache_entry_invalid",
                key=key,
                error_count=exc.error_count(),
            )
            return None

    async def _write_cache(self, key: str, result: IFSCResponse) -> None:
        payload: dict[str, Any] = result.model_dump(mode="json", by_alias=True)
        await self._cache.set(key, payload, ttl=self._cache_ttl)

    async def _read_store(self, code: str) -> StoredRecord | None:
        try:
            return await self._store.get(code)
        except StoreError as exc:
            self._logger.error("store_read_failed", ifsc=code, error=str(exc))
            return None

    async def _write_store(self, details: IFSCDetails, now: datetime) -> None:
        try:
            await self._store.upsert(details, last_updated=now)
        except StoreError as exc:
            self._logger.error("store_write_failed", ifsc=details.ifsc, error=str(exc))

    async def _fallback(
        self,
        code: str,
        cache_key: str,
        stored: StoredRecord | None,
        provider_name: str,
        exc: Exception,
    ) -> IFSCResponse:
        """Serve the stored record after a provider failure, or raise."""
        self._logger.warning(
            "provider_fetch_failed",
            ifsc=code,
            provider=provider_name,
            error=str(exc),
            error_type=type(exc).__name__,
        )

        if stored is not None:
            result = self._from_store(code, stored)
            await self._write_cache(cache_key, result)
            self._logger.warning(
                "store_fallback_stale",
                ifsc=code,
                last_updated=stored.last_updated.isoformat(),
            )
            return result

        if isinstance(exc, (IFSCNotFoundError, ProviderUnavailableError)):
            raise exc
        raise ProviderUnavailableError(
            message=f"Failed to fetch data for {code}: {exc}",
            provider_name=provider_name,
        ) from exc

    @staticmethod
    def _from_store(code: str, stored: StoredRecord) -> IFSCResponse:
        return IFSCResponse(
            ifsc=code,
            details=stored.details,
            source=ResolutionSource.STORE,
            last_updated=stored.last_updated,
        )
