"""IFSC domain models: branch records, stored entries, and lookup results.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph; no imports from upper layers).
#
# ``IFSCDetails`` is the canonical 16-field branch record exchanged at
# every boundary (store, cache, provider, HTTP response).  On the wire its
# keys are the uppercase names used by the upstream IFSC registries
# ("IFSC", "BANK", "MICR", ...); in Python the attributes are snake_case
# and the uppercase names are aliases.  Always serialize with
# ``by_alias=True`` so every boundary sees the same keys.
#
# All models are frozen.  A record is never mutated in place; the store
# overwrites it wholesale on every successful provider fetch.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResolutionSource(str, Enum):  # noqa: UP042 (StrEnum requires Python 3.11+)
    """Which tier produced the record behind a lookup result.

    A cache hit keeps whatever source the cached result was built with.
    """

    STORE = "store"
    REMOTE = "remote"


class IFSCDetails(BaseModel):
    """Branch metadata for a single IFSC code.

    String fields default to ``""`` and payment-rail flags default to
    ``False`` so partially populated upstream payloads still produce a
    complete record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ifsc: str = Field(alias="IFSC", min_length=1)
    bank: str = Field(default="", alias="BANK")
    branch: str = Field(default="", alias="BRANCH")
    centre: str = Field(default="", alias="CENTRE")
    district: str = Field(default="", alias="DISTRICT")
    state: str = Field(default="", alias="STATE")
    address: str = Field(default="", alias="ADDRESS")
    contact: str = Field(default="", alias="CONTACT")
    imps: bool = Field(default=False, alias="IMPS")
    rtgs: bool = Field(default=False, alias="RTGS")
    city: str = Field(default="", alias="CITY")
    iso3166: str = Field(default="", alias="ISO3166")
    neft: bool = Field(default=False, alias="NEFT")
    micr: str = Field(default="", alias="MICR")
    swift: str = Field(default="", alias="SWIFT")
    upi: bool = Field(default=False, alias="UPI")

    @field_validator("ifsc")
    @classmethod
    def _uppercase_code(cls, value: str) -> str:
        return value.strip().upper()

    def to_payload(self) -> dict[str, Any]:
        """Return the canonical mapping with uppercase keys."""
        return self.model_dump(by_alias=True)


class StoredRecord(BaseModel):
    """A branch record as persisted by the durable store."""

    model_config = ConfigDict(frozen=True)

    details: IFSCDetails
    last_updated: datetime

    def is_fresh(self, now: datetime, window: timedelta) -> bool:
        """Return ``True`` if the record was refreshed less than *window* ago."""
        return now - self.last_updated < window


class IFSCResponse(BaseModel):
    """Result of resolving one IFSC code.

    Cached as-is (including ``source``) under the cache's own TTL, which is
    independent of the store's freshness window.
    """

    model_config = ConfigDict(frozen=True)

    ifsc: str
    details: IFSCDetails
    source: ResolutionSource
    last_updated: datetime


class StoreStats(BaseModel):
    """Aggregate freshness statistics for the durable store."""

    model_config = ConfigDict(frozen=True)

    total_records: int = Field(ge=0)
    fresh_records: int = Field(ge=0)
    stale_records: int = Field(ge=0)
    freshness_window_days: int = Field(gt=0)
