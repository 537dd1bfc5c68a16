"""Map a fetched attribute set onto the cached snapshot.

The cache overwrites every field from a successful read.  Fields the
cloud omitted keep their previous value; a payload without ``power``
means the device is offline and yields the idle snapshot.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TypeVar

from pylayzspa._constants import clamp_target_temp
from pylayzspa.models.attributes import DeviceAttributes
from pylayzspa.models.state import DeviceState

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def attributes_to_state(
    attributes: DeviceAttributes,
    *,
    previous: DeviceState,
    fetched_at: datetime,
) -> DeviceState:
    """Build the snapshot that replaces *previous* after a fetch."""
    if not attributes.is_online:
        _logger.debug("Device %s reported offline; using idle state", attributes.did or "?")
        return DeviceState.idle(fetched_at)

    target_temp = previous.target_temp
    if attributes.temp_set is not None:
        target_temp = clamp_target_temp(attributes.temp_set)
        if target_temp != attributes.temp_set:
            _logger.warning("Reported temp_set=%s outside supported range; using %s", attributes.temp_set, target_temp)

    heating_on = _pick(attributes.heat_power, previous.heating_on)
    filter_on = _pick(attributes.filter_power, previous.filter_on)
    if heating_on and not filter_on:
        # The spa controller runs the pump whenever it heats.
        _logger.warning("Device reported heat_power=1 with filter_power=0; recording filtration as on")
        filter_on = True

    return DeviceState(
        power=bool(attributes.power),
        current_temp=_pick(attributes.temp_now, previous.current_temp),
        target_temp=target_temp,
        heating_on=heating_on,
        filter_on=filter_on,
        waves_on=_pick(attributes.wave_power, previous.waves_on),
        last_fetch=fetched_at,
        online=True,
    )


def _pick(value: T | None, fallback: T) -> T:
    return fallback if value is None else value
