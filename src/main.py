"""IFSC lookup service FastAPI application entry point.

Wires the cache, the durable store, the provider registry and the
resolution engine together via explicit construction, and exposes them to
the routes through ``app.state``.  Configuration comes from environment
variables and ``.env`` (see :mod:`src.config.settings`).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import SERVICE_VERSION
from src.api.routes import router as api_router
from src.config import Settings, settings
from src.interfaces.cache_provider import ICacheProvider
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.redis_cache import RedisCacheProvider
from src.providers.ifsc.razorpay_provider import RazorpayIFSCProvider
from src.providers.ifsc.registry import IFSCProviderRegistry
from src.providers.store.sqlite_record_store import SQLiteRecordStore
from src.services.ifsc_service import IFSCService
from src.utils.errors import ConfigurationError
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component factories
# ---------------------------------------------------------------------------


def _build_cache_provider(app_settings: Settings) -> ICacheProvider:
    """Select the cache backend named by ``CACHE_BACKEND``."""
    backend = app_settings.cache_backend.lower()
    if backend == "memory":
        return MemoryCacheProvider(
            max_size=app_settings.cache_max_size,
            ttl=app_settings.cache_ttl,
        )
    if backend == "redis":
        return RedisCacheProvider(
            redis_url=app_settings.redis_url,
            ttl=app_settings.cache_ttl,
            socket_timeout=app_settings.redis_timeout,
        )
    raise ConfigurationError(
        f"Unknown cache backend '{app_settings.cache_backend}' (expected 'memory' or 'redis')"
    )


def _build_provider_registry(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
) -> IFSCProviderRegistry:
    """Build the fixed provider table.  Fails if the default is not in it."""
    providers = [
        RazorpayIFSCProvider(
            base_url=app_settings.razorpay_ifsc_base_url,
            http_client=http_client,
            timeout=app_settings.provider_timeout,
        ),
    ]
    return IFSCProviderRegistry(providers, default=app_settings.default_ifsc_provider)


def build_components(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    Nothing is connected yet; :func:`_lifespan` initializes the store and
    the cache.
    """
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.provider_timeout),
        headers={"User-Agent": "IFSC-Service/1.0", "Accept": "application/json"},
        follow_redirects=True,
    )
    cache = _build_cache_provider(app_settings)
    store = SQLiteRecordStore(
        db_path=app_settings.store_db_path,
        timeout=app_settings.store_timeout,
    )
    provider_registry = _build_provider_registry(app_settings, http_client)

    ifsc_service = IFSCService(
        cache=cache,
        store=store,
        providers=provider_registry,
        freshness_days=app_settings.data_freshness_days,
        cache_ttl=app_settings.cache_ttl,
        key_prefix=app_settings.cache_key_prefix,
    )

    return {
        "http_client": http_client,
        "cache": cache,
        "store": store,
        "provider_registry": provider_registry,
        "ifsc_service": ifsc_service,
        "components": {
            "cache": cache.get_provider_name(),
            "store": store.get_provider_name(),
            "provider": provider_registry.default_name,
        },
        "settings": app_settings,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise the store and cache on startup, release them on shutdown."""
    components = build_components(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    await components["store"].initialize()
    await components["cache"].initialize()

    _logger.info(
        "app_startup",
        version=SERVICE_VERSION,
        environment=settings.app_env,
        **components["components"],
    )

    try:
        yield
    finally:
        await components["provider_registry"].aclose()
        http_client: httpx.AsyncClient = components["http_client"]
        await http_client.aclose()
        await components["cache"].close()
        await components["store"].close()
        _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="IFSC Lookup Service",
        version=SERVICE_VERSION,
        description=(
            "Look up Indian bank branch details by IFSC code.  Results are "
            "served from a TTL cache, a durable store, or the Razorpay IFSC "
            "registry, falling back to the last stored record when the "
            "registry is unavailable."
        ),
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )


if __name__ == "__main__":
    main()
