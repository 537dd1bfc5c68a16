"""Base model and shared field types for Gizwits payloads.

Every response model inherits from :class:`LayzBaseModel` which provides:

* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used, after giving subclasses a chance to unwrap
  nested envelopes via ``_unwrap``.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from pylayzspa.ingestion.normalize import safe_int, safe_toggle

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_epoch_timestamp(value: Any) -> datetime | None:
    """Convert an epoch timestamp (seconds **or** milliseconds) to a UTC datetime.

    Returns ``None`` when the value is ``None``, not numeric, or out of range.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        return value
    ts = safe_int(value)
    if ts is None:
        return None
    if ts >= _MS_THRESHOLD:
        ts = ts // 1000
    try:
        return datetime.fromtimestamp(ts, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


EpochTimestamp = Annotated[datetime | None, BeforeValidator(parse_epoch_timestamp)]
"""Annotated type that coerces epoch ints (seconds or ms) to UTC datetimes."""

Toggle = Annotated[bool | None, BeforeValidator(safe_toggle)]
"""Annotated type for ``0``/``1`` switch attributes."""

Celsius = Annotated[int | None, BeforeValidator(safe_int)]
"""Annotated type for whole-degree temperatures."""


class LayzBaseModel(BaseModel):
    """Base for Gizwits API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original API response dict."""

    @classmethod
    def _unwrap(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Hook for subclasses to flatten nested response envelopes."""
        return values

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Unwrap, drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = {key: value for key, value in cls._unwrap(original).items() if value is not None}

        # Only auto-stash raw when not explicitly provided (i.e. model_validate
        # from an API dict).
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
