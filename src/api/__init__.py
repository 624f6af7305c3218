"""IFSC lookup API layer: routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    status_for_error,
)
from src.api.routes import router
from src.api.schemas import ErrorResponse, HealthResponse, ProvidersResponse

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "status_for_error",
    "router",
    "ErrorResponse",
    "HealthResponse",
    "ProvidersResponse",
]
