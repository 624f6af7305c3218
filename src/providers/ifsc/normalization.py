"""Payload normalization shared by all IFSC providers.

Upstream registries omit fields freely (no CONTACT for rural branches, no
SWIFT for most of them, no UPI flag on older records).  Every provider runs
its decoded payload through :func:`normalize_payload` so the rest of the
service always sees a complete 16-field record.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.models.ifsc import IFSCDetails

_STRING_FIELDS = (
    "BANK",
    "BRANCH",
    "CENTRE",
    "DISTRICT",
    "STATE",
    "ADDRESS",
    "CONTACT",
    "CITY",
    "ISO3166",
    "MICR",
    "SWIFT",
)

_FLAG_FIELDS = ("IMPS", "RTGS", "NEFT", "UPI")


def _as_text(value: Any) -> str:
    # None, "" and False all mean "absent"; numbers (MICR) are kept as text.
    if value is None or value is False or value == "":
        return ""
    return str(value)


def normalize_payload(payload: Mapping[str, Any], ifsc_code: str) -> IFSCDetails:
    """Build an :class:`IFSCDetails` from a raw registry payload.

    Parameters
    ----------
    payload:
        Decoded JSON object from the registry, keyed by the uppercase
        field names.
    ifsc_code:
        The code that was requested.  Used when the payload has no IFSC.

    Returns
    -------
    IFSCDetails
        Missing strings are ``""``; a flag is ``True`` only when the
        payload holds the literal boolean ``true``.
    """
    fields: dict[str, Any] = {
        "IFSC": _as_text(payload.get("IFSC")) or ifsc_code,
    }
    for name in _STRING_FIELDS:
        fields[name] = _as_text(payload.get(name))
    for name in _FLAG_FIELDS:
        fields[name] = payload.get(name) is True
    return IFSCDetails.model_validate(fields)
