"""Pydantic response schemas for the IFSC lookup API.

Lookup and statistics responses reuse the domain models
(:class:`~src.models.ifsc.IFSCResponse`, :class:`~src.models.ifsc.StoreStats`)
directly; only the system endpoints and the error body are defined here.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    service: str
    version: str
    timestamp: datetime
    components: dict[str, str] = Field(
        default_factory=dict,
        description="Backend name per component (cache, store, provider)",
    )


class ProvidersResponse(BaseModel):
    """Registered IFSC providers and the one used for lookups."""

    providers: list[str]
    default: str


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
