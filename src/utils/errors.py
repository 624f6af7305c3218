"""Custom exception hierarchy for the IFSC lookup service.

All application exceptions inherit from :class:`IFSCServiceError`, which
carries an optional ``provider_name`` so error handlers can identify which
backend (e.g. "razorpay", "sqlite_store", "redis_cache") caused the failure.

The hierarchy is organized by how callers are expected to react:

    IFSCServiceError  (base -- catch-all for any service error)
    +-- InvalidIFSCFormatError   (boundary: malformed code, client error)
    +-- IFSCNotFoundError        (no data in any tier, terminal)
    +-- ProviderUnavailableError (remote fetch failed, retryable)
    +-- ConfigurationError       (unknown provider / unreachable backend)
    +-- StoreError               (durable store driver failure)

"No data" and "transient failure" are distinct types, so callers never
need to inspect message strings to decide whether a retry makes sense.
"""


class IFSCServiceError(Exception):
    """Base exception for all IFSC lookup service errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which backend triggered the error.  The
    ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[razorpay] Read timed out``.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Boundary errors
# ---------------------------------------------------------------------------

class InvalidIFSCFormatError(IFSCServiceError):
    """Raised by the inbound boundary when a code fails the format check.

    Never raised by the resolution engine itself.
    """

    def __init__(self, ifsc_code: str) -> None:
        self.ifsc_code = ifsc_code
        super().__init__(
            message=(
                f"Invalid IFSC code format: '{ifsc_code}'. "
                "Expected format: ABCD0123456"
            ),
        )


# ---------------------------------------------------------------------------
# Resolution errors
# ---------------------------------------------------------------------------

class IFSCNotFoundError(IFSCServiceError):
    """Raised when no tier (cache, store, provider) has data for a code."""

    def __init__(self, ifsc_code: str, provider_name: str | None = None) -> None:
        self.ifsc_code = ifsc_code
        super().__init__(
            message=f"IFSC code '{ifsc_code}' not found",
            provider_name=provider_name,
        )


class ProviderUnavailableError(IFSCServiceError):
    """Raised when a remote data provider is unreachable or misbehaving.

    The message always carries the underlying failure text for
    diagnostics.  The resolution engine catches this to fall back to the
    last stored record; it only reaches the caller when no record exists.
    """

    retryable = True

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration / backend errors
# ---------------------------------------------------------------------------

class ConfigurationError(IFSCServiceError):
    """Raised when configuration is invalid, a provider name is unknown,
    or a required backend is unreachable at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StoreError(IFSCServiceError):
    """Raised when the durable record store fails to read or write."""

    retryable = True

    def __init__(
        self,
        message: str = "Record store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
