"""Device attribute set returned by ``/devdata/{did}/latest``."""

from __future__ import annotations

from typing import Any

from pylayzspa.models._base import Celsius, EpochTimestamp, LayzBaseModel, Toggle

__all__ = ["DeviceAttributes"]


class DeviceAttributes(LayzBaseModel):
    """Latest attribute values reported by the cloud.

    Every attribute is optional.  A payload without ``power`` means the
    cloud has lost contact with the device.
    """

    did: str | None = None
    updated_at: EpochTimestamp = None

    power: Toggle = None
    temp_now: Celsius = None
    temp_set: Celsius = None
    heat_power: Toggle = None
    filter_power: Toggle = None
    wave_power: Toggle = None

    @classmethod
    def _unwrap(cls, values: dict[str, Any]) -> dict[str, Any]:
        # {"did": ..., "attr": {...}} and the older {"data": {"attr": {...}}}
        data = values.get("data")
        envelope = data if isinstance(data, dict) and "attr" in data else values
        attrs = envelope.get("attr")
        if not isinstance(attrs, dict):
            return values
        merged = {key: value for key, value in envelope.items() if key != "attr"}
        merged.update(attrs)
        return merged

    @property
    def is_online(self) -> bool:
        """Whether the device reported its power attribute."""
        return self.power is not None
