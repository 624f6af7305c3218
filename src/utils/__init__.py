"""Utility modules for the IFSC lookup service.

Available utility modules (all re-exported here for convenience):

- **errors** -- Domain-specific exception hierarchy rooted at
  IFSCServiceError; "not found" and "provider unavailable" are distinct
  types so the boundary can map them to different HTTP statuses.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **validation** -- IFSC format check and uppercase normalization used by
  the HTTP routes and the CLI before the resolution engine runs.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ConfigurationError,
    IFSCNotFoundError,
    IFSCServiceError,
    InvalidIFSCFormatError,
    ProviderUnavailableError,
    StoreError,
)

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

# -- IFSC format validation ------------------------------------------------
from src.utils.validation import IFSC_PATTERN, is_valid_ifsc, normalize_ifsc

__all__ = [
    "ConfigurationError",
    "IFSCNotFoundError",
    "IFSCServiceError",
    "IFSC_PATTERN",
    "InvalidIFSCFormatError",
    "ProviderUnavailableError",
    "StoreError",
    "configure_logging",
    "get_logger",
    "is_valid_ifsc",
    "normalize_ifsc",
]
