"""Heating/filtration interlock.

The cloud accepts independent attribute writes, so nothing on the server
side stops the heater from running while the filtration pump is off.
This module is the only place that changes ``heat_power`` or
``filter_power`` and it does so by ordering commands:

* heating on with the pump off: ``filter_power=1`` first, then
  ``heat_power=1``;
* pump off while heating: ``heat_power=0`` first, then ``filter_power=0``.

The first command of each pair is a prerequisite.  If it fails, the
dependent command is never sent and :class:`LayzSafetyAbortError` is
raised.  There is no rollback of confirmed steps; the cache is
reconciled with a forced refresh instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pylayzspa._constants import ATTR_FILTER_POWER, ATTR_HEAT_POWER
from pylayzspa.client import RemoteClient
from pylayzspa.exceptions import LayzError, LayzSafetyAbortError
from pylayzspa.models.control import AttributePatch
from pylayzspa.models.state import DeviceState, FiltrationHeatingState
from pylayzspa.state.cache import DeviceStateCache

_logger = logging.getLogger(__name__)

_STATE_FIELD: dict[str, str] = {
    ATTR_FILTER_POWER: "filter_on",
    ATTR_HEAT_POWER: "heating_on",
}


@dataclass(frozen=True, slots=True)
class InterlockStep:
    """One remote command in an interlock sequence."""

    attribute: str
    value: bool
    prerequisite: bool = False

    def patch(self) -> AttributePatch:
        return AttributePatch.model_validate({self.attribute: self.value})

    def state_update(self) -> dict[str, Any]:
        return {_STATE_FIELD[self.attribute]: self.value}

    def __str__(self) -> str:
        return f"{self.attribute}={int(self.value)}"


def target_state(
    current: FiltrationHeatingState,
    *,
    heating: bool | None = None,
    filtration: bool | None = None,
) -> FiltrationHeatingState:
    """State the device ends in once a request has been carried out."""
    _check_request(heating, filtration)
    if heating is True:
        return FiltrationHeatingState.HEATING
    if heating is False:
        return FiltrationHeatingState.FILTERING if current.filter_on else FiltrationHeatingState.IDLE
    if filtration:
        return current if current.filter_on else FiltrationHeatingState.FILTERING
    return FiltrationHeatingState.IDLE


def plan(
    current: FiltrationHeatingState,
    *,
    heating: bool | None = None,
    filtration: bool | None = None,
) -> list[InterlockStep]:
    """Ordered commands for one heating or filtration request.

    The requested attribute is always pushed, even when the cache already
    shows that value, so a stale cache cannot swallow a user command.
    """
    _check_request(heating, filtration)
    steps: list[InterlockStep] = []
    if heating is not None:
        if heating and not current.filter_on:
            steps.append(InterlockStep(ATTR_FILTER_POWER, True, prerequisite=True))
        steps.append(InterlockStep(ATTR_HEAT_POWER, heating))
    elif filtration is not None:
        if not filtration and current.heating_on:
            steps.append(InterlockStep(ATTR_HEAT_POWER, False, prerequisite=True))
        steps.append(InterlockStep(ATTR_FILTER_POWER, filtration))
    return steps


def _check_request(heating: bool | None, filtration: bool | None) -> None:
    if (heating is None) == (filtration is None):
        raise ValueError("exactly one of heating or filtration must be given")


class SafetyInterlock:
    """Runs heating/filtration requests as ordered, abortable sequences.

    Callers must not run two sequences for the same device at once;
    :class:`~pylayzspa.surface.SpaControlSurface` holds its engine lock
    around every call.
    """

    def __init__(self, client: RemoteClient, cache: DeviceStateCache) -> None:
        self._client = client
        self._cache = cache

    async def set_heating(self, on: bool) -> DeviceState:
        """Turn the heater on (starting filtration first if needed) or off."""
        return await self._execute(heating=bool(on))

    async def set_filtration(self, on: bool) -> DeviceState:
        """Turn filtration on, or off (stopping the heater first if needed)."""
        return await self._execute(filtration=bool(on))

    async def _execute(self, *, heating: bool | None = None, filtration: bool | None = None) -> DeviceState:
        before = self._cache.read()
        current = before.filtration_heating
        target = target_state(current, heating=heating, filtration=filtration)
        steps = plan(current, heating=heating, filtration=filtration)
        _logger.debug(
            "Interlock %s -> %s via [%s]",
            current.name,
            target.name,
            ", ".join(str(step) for step in steps),
        )

        self._cache.apply_optimistic({"filter_on": target.filter_on, "heating_on": target.heating_on})

        # Snapshot plus every step the cloud has accepted so far.  Each
        # intermediate value is a valid DeviceState, which the model checks.
        confirmed = before
        for index, step in enumerate(steps):
            try:
                await self._client.push_attributes(step.patch())
            except LayzError as exc:
                self._cache.restore(confirmed)
                await self._cache.refresh(force=True)
                if step.prerequisite:
                    skipped = ", ".join(str(s) for s in steps[index + 1 :])
                    _logger.error(
                        "Could not set %s; to protect the spa %s will not be sent: %s",
                        step,
                        skipped,
                        exc,
                    )
                    raise LayzSafetyAbortError(
                        f"{step} failed; {skipped} not sent",
                        step=skipped,
                        failed_step=str(step),
                    ) from exc
                _logger.warning("Could not set %s: %s", step, exc)
                raise
            confirmed = confirmed.updated(**step.state_update())

        return await self._cache.refresh(force=True)
