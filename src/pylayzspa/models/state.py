"""Cached device state snapshot."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pylayzspa._constants import IDLE_STATE, INITIAL_STATE, TEMP_MAX_C, TEMP_MIN_C

__all__ = [
    "DeviceState",
    "FiltrationHeatingState",
]


class FiltrationHeatingState(enum.Enum):
    """Reachable ``(filter_on, heating_on)`` combinations.

    Heating without filtration has no member: it is not a state the engine
    may ever produce.
    """

    IDLE = (False, False)
    FILTERING = (True, False)
    HEATING = (True, True)

    @property
    def filter_on(self) -> bool:
        return self.value[0]

    @property
    def heating_on(self) -> bool:
        return self.value[1]

    @classmethod
    def of(cls, *, filter_on: bool, heating_on: bool) -> FiltrationHeatingState:
        """Look up a combination, raising :class:`ValueError` for heater without filtration."""
        return cls((filter_on, heating_on))


class DeviceState(BaseModel):
    """Last known device attributes plus the time they were fetched.

    Instances are immutable; the cache replaces the whole snapshot on every
    change.  ``heating_on`` implies ``filter_on`` for every instance.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    power: bool
    current_temp: int
    target_temp: int = Field(ge=TEMP_MIN_C, le=TEMP_MAX_C)
    heating_on: bool
    filter_on: bool
    waves_on: bool
    last_fetch: datetime | None = None
    online: bool = True

    @field_validator("last_fetch")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            raise ValueError("last_fetch must be timezone-aware")
        return value

    @model_validator(mode="after")
    def _heater_requires_filtration(self) -> DeviceState:
        if self.heating_on and not self.filter_on:
            raise ValueError("heating_on requires filter_on")
        return self

    @classmethod
    def initial(cls) -> DeviceState:
        """Snapshot used before the first fetch."""
        return cls.model_validate(INITIAL_STATE)

    @classmethod
    def idle(cls, fetched_at: datetime | None = None) -> DeviceState:
        """Snapshot recorded while the device reports as disconnected."""
        return cls.model_validate({**IDLE_STATE, "last_fetch": fetched_at, "online": False})

    @property
    def filtration_heating(self) -> FiltrationHeatingState:
        return FiltrationHeatingState.of(filter_on=self.filter_on, heating_on=self.heating_on)

    def updated(self, **changes: Any) -> DeviceState:
        """Return a validated copy with *changes* applied.

        ``model_copy(update=...)`` skips validation, so the merged fields
        are re-validated here to keep both invariants.
        """
        return type(self).model_validate({**self.model_dump(), **changes})
