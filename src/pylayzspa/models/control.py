"""Write payloads, command acknowledgements and control point descriptors."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pylayzspa._constants import (
    ATTR_FILTER_POWER,
    ATTR_HEAT_POWER,
    ATTR_POWER,
    ATTR_TEMP_SET,
    ATTR_WAVE_POWER,
    MANUFACTURER,
    MODEL,
    TEMP_MAX_C,
    TEMP_MIN_C,
    TEMP_STEP_C,
    validate_target_temp,
)
from pylayzspa.models._base import LayzBaseModel

__all__ = [
    "AttributePatch",
    "CommandAck",
    "ControlPoint",
    "ControlPointKind",
    "DeviceInfo",
    "HeaterActivity",
]

#: Patch field -> :class:`~pylayzspa.models.state.DeviceState` field.
_STATE_FIELDS: dict[str, str] = {
    ATTR_POWER: "power",
    ATTR_TEMP_SET: "target_temp",
    ATTR_HEAT_POWER: "heating_on",
    ATTR_FILTER_POWER: "filter_on",
    ATTR_WAVE_POWER: "waves_on",
}


class AttributePatch(BaseModel):
    """Partial attribute update for ``/control/{did}``.

    Only the fields that are set are sent; the cloud leaves every other
    attribute untouched.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    power: bool | None = None
    temp_set: int | None = None
    heat_power: bool | None = None
    filter_power: bool | None = None
    wave_power: bool | None = None

    @field_validator("temp_set")
    @classmethod
    def _temp_in_range(cls, value: int | None) -> int | None:
        if value is None:
            return None
        return validate_target_temp(value)

    @model_validator(mode="after")
    def _not_empty(self) -> AttributePatch:
        if all(getattr(self, name) is None for name in _STATE_FIELDS):
            raise ValueError("attribute patch must set at least one attribute")
        return self

    def to_attrs(self) -> dict[str, int]:
        """Wire form: toggles as ``0``/``1``, temperature as ``int``."""
        attrs: dict[str, int] = {}
        for name in _STATE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                attrs[name] = int(value)
        return attrs

    def to_state_update(self) -> dict[str, Any]:
        """Same fields keyed by :class:`DeviceState` names, for optimistic writes."""
        return {
            state_field: getattr(self, name)
            for name, state_field in _STATE_FIELDS.items()
            if getattr(self, name) is not None
        }

    def describe(self) -> str:
        return ",".join(f"{key}={value}" for key, value in self.to_attrs().items())


class CommandAck(LayzBaseModel):
    """Acknowledgement for an accepted control request.

    The control endpoint answers ``{}`` on success; ``attrs`` records what
    was sent.
    """

    attrs: dict[str, int] = Field(default_factory=dict)


class HeaterActivity(enum.IntEnum):
    """Heater activity as shown by a heater/cooler control."""

    INACTIVE = 0
    HEATING = 2


class ControlPointKind(enum.StrEnum):
    TOGGLE = "toggle"
    RANGE = "range"


class ControlPoint(BaseModel):
    """Host-facing description of one control point."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    name: str
    kind: ControlPointKind
    writable: bool = True
    min_value: int | None = None
    max_value: int | None = None
    step: int | None = None
    unit: str | None = None

    @classmethod
    def toggle(cls, key: str, name: str) -> ControlPoint:
        return cls(key=key, name=name, kind=ControlPointKind.TOGGLE)

    @classmethod
    def temperature(cls, key: str, name: str, *, writable: bool) -> ControlPoint:
        if not writable:
            return cls(key=key, name=name, kind=ControlPointKind.RANGE, writable=False, unit="celsius")
        return cls(
            key=key,
            name=name,
            kind=ControlPointKind.RANGE,
            min_value=TEMP_MIN_C,
            max_value=TEMP_MAX_C,
            step=TEMP_STEP_C,
            unit="celsius",
        )


class DeviceInfo(BaseModel):
    """Accessory information shown by the host."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    manufacturer: str = MANUFACTURER
    model: str = MODEL
    serial_number: str
