"""IFSC code format validation for the inbound boundary.

An IFSC is 11 characters: a 4-letter bank prefix, a literal ``0``
reserved for future use, and a 6-character alphanumeric branch code,
e.g. ``HDFC0CAGSBK``.  Input is matched case-insensitively and
normalized to uppercase.
"""

from __future__ import annotations

import re

from src.utils.errors import InvalidIFSCFormatError

IFSC_PATTERN = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")


def is_valid_ifsc(code: str) -> bool:
    """Return ``True`` if *code* (any case) is a well-formed IFSC."""
    return bool(IFSC_PATTERN.fullmatch(code.upper()))


def normalize_ifsc(code: str) -> str:
    """Uppercase *code* and check it against :data:`IFSC_PATTERN`.

    Raises
    ------
    InvalidIFSCFormatError
        If the normalized code is not a well-formed IFSC.
    """
    normalized = code.strip().upper()
    if not IFSC_PATTERN.fullmatch(normalized):
        raise InvalidIFSCFormatError(code)
    return normalized
