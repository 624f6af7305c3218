"""HTTP middleware for the IFSC lookup API.

- ``configure_cors`` opens the read-only API to browser clients.
- ``RequestLoggingMiddleware`` tags each request with an id (taken from
  ``X-Request-ID`` or generated), binds it into the structlog context,
  echoes it on the response, and logs one ``http_request`` line with
  status and duration.
- ``ErrorHandlingMiddleware`` turns ``IFSCServiceError`` subclasses into
  :class:`ErrorResponse` JSON with a status code chosen by error kind.

Starlette runs the last-added middleware first.  ``main.py`` adds error
handling before request logging, so the logged status is the mapped one.
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import (
    ConfigurationError,
    IFSCNotFoundError,
    IFSCServiceError,
    InvalidIFSCFormatError,
    ProviderUnavailableError,
    StoreError,
)
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# First match wins; any other IFSCServiceError maps to 500.
_STATUS_BY_ERROR: tuple[tuple[type[IFSCServiceError], int], ...] = (
    (InvalidIFSCFormatError, 400),
    (IFSCNotFoundError, 404),
    (ProviderUnavailableError, 503),
    (ConfigurationError, 503),
    (StoreError, 503),
)


def status_for_error(exc: IFSCServiceError) -> int:
    """Return the HTTP status code for an application error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Allow cross-origin GETs from *allowed_origins* (every origin by default)."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id and log method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _logger.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert ``IFSCServiceError`` into a JSON :class:`ErrorResponse`.

    The client gets the exception class name and its message only.  Client
    errors (4xx) log at warning level, server-side failures at error level.
    Exceptions outside the hierarchy are left to FastAPI's 500 handler.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except IFSCServiceError as exc:
            status_code = status_for_error(exc)
            emit = _logger.warning if status_code < 500 else _logger.error
            emit(
                "application_error",
                error_type=type(exc).__name__,
                detail=exc.message,
                provider=exc.provider_name,
                path=request.url.path,
                status=status_code,
            )
            body = ErrorResponse(error=type(exc).__name__, detail=exc.message)
            return JSONResponse(status_code=status_code, content=body.model_dump())
