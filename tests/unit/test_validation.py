"""Unit tests for IFSC format validation."""

from __future__ import annotations

import pytest

from src.utils.errors import InvalidIFSCFormatError
from src.utils.validation import is_valid_ifsc, normalize_ifsc


@pytest.mark.parametrize("code", ["HDFC0CAGSBK", "SBIN0000001", "hdfc0cagsbk", "IcIc0A1B2C3"])
def test_valid_codes(code: str) -> None:
    assert is_valid_ifsc(code) is True


@pytest.mark.parametrize(
    "code",
    [
        "INVALID123",      # wrong length, no reserved zero
        "HDFC1CAGSBK",     # fifth character must be 0
        "HDF00CAGSBK",     # bank prefix must be letters
        "HDFC0CAGSB",      # too short
        "HDFC0CAGSBKX",    # too long
        "HDFC0CAG-BK",
        "",
    ],
)
def test_invalid_codes(code: str) -> None:
    assert is_valid_ifsc(code) is False


def test_trailing_newline_rejected() -> None:
    assert is_valid_ifsc("HDFC0CAGSBK\n") is False


def test_normalize_uppercases_and_strips() -> None:
    assert normalize_ifsc("  hdfc0cagsbk ") == "HDFC0CAGSBK"


def test_normalize_raises_with_original_code() -> None:
    with pytest.raises(InvalidIFSCFormatError) as exc_info:
        normalize_ifsc("INVALID123")
    assert exc_info.value.ifsc_code == "INVALID123"
    assert "Expected format: ABCD0123456" in exc_info.value.message
