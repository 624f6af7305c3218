"""FastAPI routes for the IFSC lookup service.

Endpoint                         Method  Description
-------------------------------  ------  ------------------------------------
/api/v1/ifsc/{ifsc_code}         GET     Resolve one IFSC code
/api/v1/ifsc/stats/summary       GET     Store freshness statistics
/api/v1/health                   GET     Health check + component names
/api/v1/providers                GET     Registered IFSC providers

Service dependencies are read from ``app.state`` (populated in
``main.py``) through ``Depends`` helpers and ``Annotated`` aliases.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Path, Request

from src.api.schemas import ErrorResponse, HealthResponse, ProvidersResponse
from src.models.ifsc import IFSCResponse, StoreStats
from src.providers.ifsc.registry import IFSCProviderRegistry
from src.services.ifsc_service import IFSCService
from src.utils.logging import get_logger
from src.utils.validation import normalize_ifsc

_logger: structlog.BoundLogger = get_logger(__name__)

SERVICE_NAME = "ifsc-lookup-service"
SERVICE_VERSION = "1.0.0"

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_ifsc_service(request: Request) -> IFSCService:
    return request.app.state.ifsc_service


def _get_provider_registry(request: Request) -> IFSCProviderRegistry:
    return request.app.state.provider_registry


IFSCServiceDep = Annotated[IFSCService, Depends(_get_ifsc_service)]
ProviderRegistryDep = Annotated[IFSCProviderRegistry, Depends(_get_provider_registry)]

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed IFSC code"},
    404: {"model": ErrorResponse, "description": "IFSC code not found"},
    503: {"model": ErrorResponse, "description": "Upstream registry unavailable"},
}


# ---------------------------------------------------------------------------
# IFSC endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/ifsc/stats/summary",
    response_model=StoreStats,
    responses={503: {"model": ErrorResponse}},
    summary="Store freshness statistics",
)
async def get_stats(service: IFSCServiceDep) -> StoreStats:
    """Return total, fresh and stale record counts for the durable store."""
    return await service.get_stats()


@router.get(
    "/ifsc/{ifsc_code}",
    response_model=IFSCResponse,
    responses=_ERROR_RESPONSES,
    summary="Get bank branch details by IFSC code",
)
async def get_ifsc_details(
    service: IFSCServiceDep,
    ifsc_code: Annotated[str, Path(description="IFSC code, e.g. HDFC0CAGSBK")],
) -> IFSCResponse:
    """Resolve *ifsc_code*.  Malformed codes are rejected with 400."""
    code = normalize_ifsc(ifsc_code)
    result = await service.resolve(code)
    _logger.info("ifsc_lookup", ifsc=code, source=result.source.value)
    return result


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return service identity, current time, and configured backends."""
    components: dict[str, str] = getattr(request.app.state, "components", {})
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.now(timezone.utc),
        components=dict(components),
    )


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List registered IFSC providers",
)
async def list_providers(registry: ProviderRegistryDep) -> ProvidersResponse:
    return ProvidersResponse(
        providers=registry.provider_names(),
        default=registry.default_name,
    )
