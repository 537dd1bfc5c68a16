"""Control points exposed to a home-automation host.

Reads are synchronous and served from the cache.  Writes are coroutines
that run under one engine lock, together with every background poll, so
an optimistic value is never overwritten by a poll in flight and two
heating/filtration sequences never interleave.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pylayzspa.client import RemoteClient
from pylayzspa.config import LayzConfig
from pylayzspa.exceptions import LayzError
from pylayzspa.interlock import SafetyInterlock
from pylayzspa.models.control import AttributePatch, ControlPoint, DeviceInfo, HeaterActivity
from pylayzspa.models.state import DeviceState
from pylayzspa.state.cache import DeviceStateCache

_logger = logging.getLogger(__name__)


class SpaControlSurface:
    """Per-control-point read/write operations for one spa.

    Usage::

        async with LayzClient(config) as client, SpaControlSurface(client, config) as spa:
            await spa.write_target_temperature(38)
            spa.read_target_temperature()
    """

    def __init__(
        self,
        client: RemoteClient,
        config: LayzConfig,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._config = config
        if clock is None:
            self._cache = DeviceStateCache(client, ttl=config.cache_ttl)
        else:
            self._cache = DeviceStateCache(client, ttl=config.cache_ttl, clock=clock)
        self._interlock = SafetyInterlock(client, self._cache)
        self._lock = asyncio.Lock()
        self._poll_task: asyncio.Task[None] | None = None

    @property
    def cache(self) -> DeviceStateCache:
        return self._cache

    @property
    def interlock(self) -> SafetyInterlock:
        return self._interlock

    @property
    def device_info(self) -> DeviceInfo:
        return DeviceInfo(serial_number=self._config.device_id)

    @staticmethod
    def control_points() -> tuple[ControlPoint, ...]:
        return (
            ControlPoint.toggle("power", "Power"),
            ControlPoint.temperature("target_temperature", "Target temperature", writable=True),
            ControlPoint.temperature("current_temperature", "Current temperature", writable=False),
            ControlPoint.toggle("heating", "Heating"),
            ControlPoint.toggle("filtration", "Filter"),
            ControlPoint.toggle("waves", "Waves"),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SpaControlSurface:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def start(self) -> None:
        """Start the background poll task (idempotent)."""
        if self.is_polling:
            return
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())

    async def stop(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def poll_once(self) -> DeviceState:
        """One poll tick; the cache TTL decides whether the cloud is contacted."""
        async with self._lock:
            return await self._cache.refresh(force=False)

    async def _poll_loop(self) -> None:
        interval = self._config.poll_interval
        while True:
            try:
                await self.poll_once()
            except Exception:
                _logger.exception("Poll tick failed")
            await asyncio.sleep(interval)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read_state(self) -> DeviceState:
        return self._cache.read()

    def read_power(self) -> bool:
        return self._cache.read().power

    def read_target_temperature(self) -> int:
        return self._cache.read().target_temp

    def read_current_temperature(self) -> int:
        return self._cache.read().current_temp

    def read_heating_state(self) -> bool:
        return self._cache.read().heating_on

    def read_heater_activity(self) -> HeaterActivity:
        return HeaterActivity.HEATING if self._cache.read().heating_on else HeaterActivity.INACTIVE

    def read_filtration_state(self) -> bool:
        return self._cache.read().filter_on

    def read_wave_state(self) -> bool:
        return self._cache.read().waves_on

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def write_power(self, on: bool) -> DeviceState:
        _logger.debug("Set power -> %s", on)
        return await self._write(AttributePatch(power=on))

    async def write_target_temperature(self, temperature: int) -> DeviceState:
        """Change the set-point; out-of-range values raise before any I/O."""
        _logger.debug("Set target temperature -> %s", temperature)
        return await self._write(AttributePatch(temp_set=temperature))

    async def write_wave_state(self, on: bool) -> DeviceState:
        _logger.debug("Set waves -> %s", on)
        return await self._write(AttributePatch(wave_power=on))

    async def write_heating_state(self, on: bool) -> DeviceState:
        _logger.debug("Set heating -> %s", on)
        async with self._lock:
            return await self._interlock.set_heating(on)

    async def write_filtration_state(self, on: bool) -> DeviceState:
        _logger.debug("Set filtration -> %s", on)
        async with self._lock:
            return await self._interlock.set_filtration(on)

    async def _write(self, patch: AttributePatch) -> DeviceState:
        """Optimistic update, remote command, then forced refresh."""
        async with self._lock:
            before = self._cache.read()
            self._cache.apply_optimistic(patch.to_state_update())
            try:
                await self._client.push_attributes(patch)
            except LayzError as exc:
                _logger.warning("Could not set %s: %s", patch.describe(), exc)
                self._cache.restore(before)
                await self._cache.refresh(force=True)
                raise
            return await self._cache.refresh(force=True)
