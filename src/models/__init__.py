"""IFSC lookup domain models: re-exports all public model classes.

Other parts of the codebase import directly from ``src.models``
(e.g. ``from src.models import IFSCDetails``) instead of the submodule.
"""

from __future__ import annotations

from src.models.ifsc import (
    IFSCDetails,
    IFSCResponse,
    ResolutionSource,
    StoredRecord,
    StoreStats,
)

__all__ = [
    "IFSCDetails",
    "IFSCResponse",
    "ResolutionSource",
    "StoreStats",
    "StoredRecord",
]
