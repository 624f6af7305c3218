"""Abstract base class for the durable IFSC record store.

The store keeps the last known-good record per IFSC code together with the
time it was last refreshed from a remote provider.  It is the source of
truth when the cache is cold and the fallback when providers fail.
Records are overwritten, never versioned, and never deleted by the
resolution engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from src.models.ifsc import IFSCDetails, StoredRecord


class IRecordStore(ABC):
    """Contract for durable record persistence.

    All operations are async to support network-backed stores.  Driver
    failures are raised as :class:`~src.utils.errors.StoreError`.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def get(self, ifsc_code: str) -> StoredRecord | None:
        """Return the stored record for *ifsc_code*, or ``None`` if absent."""

    @abstractmethod
    async def upsert(self, details: IFSCDetails, last_updated: datetime) -> StoredRecord:
        """Insert or overwrite the record for ``details.ifsc``.

        Must be a single atomic operation of the underlying store (no
        read-then-write), so concurrent upserts for the same code converge.

        Parameters
        ----------
        details:
            The freshly fetched record.
        last_updated:
            Refresh timestamp to persist (UTC).

        Returns
        -------
        StoredRecord
            The record as now stored.
        """

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of stored records."""

    @abstractmethod
    async def count_updated_since(self, cutoff: datetime) -> int:
        """Return the number of records with ``last_updated > cutoff``.

        A record exactly at the cutoff is not counted, matching
        :meth:`StoredRecord.is_fresh`.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store backend."""

    async def close(self) -> None:
        """Release store connections.  Called once at shutdown."""
