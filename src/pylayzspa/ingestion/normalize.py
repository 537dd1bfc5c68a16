"""Normalization helpers.

Centralizes defensive parsing of attribute values reported by the cloud.
"""

from __future__ import annotations

import math
from typing import Any

_TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})
_FALSE_STRINGS = frozenset({"0", "false", "off", "no"})


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(round(parsed))


def safe_toggle(value: Any) -> bool | None:
    """Parse a switch attribute (``0``/``1``, bool, or on/off text)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        return None
    parsed = safe_int(value)
    if parsed is None:
        return None
    return parsed != 0
