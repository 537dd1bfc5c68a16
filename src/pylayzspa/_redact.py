"""Helpers for safe debug logging.

Every request carries the user token in a header, so headers go through
:func:`redact_for_log` before they reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "x-gizwits-user-token",
        "user_token",
        "api_token",
        "token",
        "authorization",
    }
)


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a header or body mapping with tokens masked.

    Request bodies nest one level (``{"attrs": {...}}``); nested mappings are
    redacted the same way.  Other values are logged as-is, with long
    strings cut to *max_string* characters.
    """
    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>"
            if str(key).lower() in _SENSITIVE_KEYS
            else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value
