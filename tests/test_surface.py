from __future__ import annotations

import asyncio

import pytest
from conftest import FakeClock, FakeSpaCloud, wait_until

from pylayzspa.config import LayzConfig
from pylayzspa.exceptions import LayzRemoteRejectedError, LayzSafetyAbortError, LayzTransportError
from pylayzspa.models.control import ControlPointKind, HeaterActivity
from pylayzspa.models.state import DeviceState
from pylayzspa.surface import SpaControlSurface


@pytest.fixture
def spa(cloud: FakeSpaCloud, config: LayzConfig, clock: FakeClock) -> SpaControlSurface:
    return SpaControlSurface(cloud, config, clock=clock)


def test_reads_come_from_cache(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    assert spa.read_power() is False
    assert spa.read_target_temperature() == 30
    assert spa.read_current_temperature() == 25
    assert spa.read_heating_state() is False
    assert spa.read_filtration_state() is False
    assert spa.read_wave_state() is False
    assert spa.read_heater_activity() is HeaterActivity.INACTIVE
    assert spa.read_state() == DeviceState.initial()
    assert cloud.calls == []


@pytest.mark.asyncio
async def test_target_temperature_is_visible_before_refresh(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    cloud.push_gate = asyncio.Event()

    task = asyncio.create_task(spa.write_target_temperature(32))
    await wait_until(lambda: cloud.pushes)

    assert spa.read_target_temperature() == 32
    assert cloud.calls == ["push temp_set=32"]

    cloud.push_gate.set()
    state = await task

    assert cloud.calls == ["push temp_set=32", "fetch"]
    assert state.target_temp == 32
    assert spa.read_target_temperature() == 32


@pytest.mark.asyncio
async def test_out_of_range_temperature_is_rejected_before_io(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    with pytest.raises(ValueError):
        await spa.write_target_temperature(41)

    assert cloud.calls == []
    assert spa.read_target_temperature() == 30


@pytest.mark.asyncio
async def test_failed_write_rolls_back_optimistic_value(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    cloud.push_errors["wave_power"] = LayzRemoteRejectedError("HTTP 500", status_code=500)
    cloud.fetch_error = LayzTransportError("offline")

    with pytest.raises(LayzRemoteRejectedError):
        await spa.write_wave_state(True)

    assert spa.read_wave_state() is False
    assert cloud.calls == ["push wave_power=1", "fetch"]


@pytest.mark.asyncio
async def test_failed_write_reconciles_with_remote(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    cloud.push_errors["power"] = LayzTransportError("reset")

    with pytest.raises(LayzTransportError):
        await spa.write_power(False)

    # Forced refresh picked up what the device actually reports.
    assert spa.read_power() is True
    assert spa.read_target_temperature() == 35


@pytest.mark.asyncio
async def test_power_and_waves_push_single_attribute(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    await spa.write_power(True)
    await spa.write_wave_state(True)

    assert cloud.pushes == [{"power": 1}, {"wave_power": 1}]
    assert spa.read_power() is True
    assert spa.read_wave_state() is True


@pytest.mark.asyncio
async def test_heating_from_idle_turns_on_filtration_then_heater(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    state = await spa.write_heating_state(True)

    assert cloud.pushes == [{"filter_power": 1}, {"heat_power": 1}]
    assert (state.heating_on, state.filter_on) == (True, True)
    assert spa.read_heating_state() is True
    assert spa.read_filtration_state() is True
    assert spa.read_heater_activity() is HeaterActivity.HEATING


@pytest.mark.asyncio
async def test_heating_aborts_when_filtration_fails(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    cloud.push_errors["filter_power"] = LayzRemoteRejectedError("HTTP 503", status_code=503)

    with pytest.raises(LayzSafetyAbortError):
        await spa.write_heating_state(True)

    assert spa.read_heating_state() is False
    assert {"heat_power": 1} not in cloud.pushes


@pytest.mark.asyncio
async def test_filtration_off_while_heating(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    cloud.attrs.update(filter_power=1, heat_power=1)
    await spa.poll_once()

    await spa.write_filtration_state(False)

    assert cloud.pushes == [{"heat_power": 0}, {"filter_power": 0}]
    assert spa.read_filtration_state() is False
    assert spa.read_heating_state() is False


@pytest.mark.asyncio
async def test_poll_waits_for_inflight_write(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    cloud.push_gate = asyncio.Event()

    write = asyncio.create_task(spa.write_target_temperature(32))
    await wait_until(lambda: cloud.pushes)
    poll = asyncio.create_task(spa.poll_once())
    for _ in range(5):
        await asyncio.sleep(0)

    # The poll is queued behind the write and has not overwritten 32 with 35.
    assert "fetch" not in cloud.calls
    assert spa.read_target_temperature() == 32

    cloud.push_gate.set()
    await write
    await poll

    # Write's forced refresh makes the snapshot fresh, so the poll is served from cache.
    assert cloud.calls == ["push temp_set=32", "fetch"]


@pytest.mark.asyncio
async def test_overlapping_interlock_writes_do_not_interleave(spa: SpaControlSurface, cloud: FakeSpaCloud) -> None:
    heat_on = asyncio.create_task(spa.write_heating_state(True))
    filter_off = asyncio.create_task(spa.write_filtration_state(False))

    await asyncio.gather(heat_on, filter_off)

    assert cloud.calls == [
        "push filter_power=1",
        "push heat_power=1",
        "fetch",
        "push heat_power=0",
        "push filter_power=0",
        "fetch",
    ]
    assert cloud.heater_without_filtration == 0


@pytest.mark.asyncio
async def test_poll_loop_relies_on_cache_ttl(cloud: FakeSpaCloud, config: LayzConfig) -> None:
    spa = SpaControlSurface(cloud, config)

    async with spa:
        assert spa.is_polling
        await asyncio.sleep(config.poll_interval * 5)

    assert not spa.is_polling
    assert cloud.calls == ["fetch"]
    assert spa.read_target_temperature() == 35


@pytest.mark.asyncio
async def test_poll_loop_survives_read_failures(cloud: FakeSpaCloud, config: LayzConfig) -> None:
    cloud.fetch_error = LayzTransportError("offline")
    spa = SpaControlSurface(cloud, config)

    spa.start()
    spa.start()
    await wait_until(lambda: len(cloud.calls) >= 1)
    cloud.fetch_error = None
    await wait_until(lambda: spa.read_state().last_fetch is not None, attempts=400, interval=0.005)
    await spa.stop()

    assert spa.cache.failure_count >= 1
    assert spa.read_state().last_fetch is not None


def test_control_points_and_device_info(spa: SpaControlSurface) -> None:
    points = {point.key: point for point in spa.control_points()}

    assert set(points) == {
        "power",
        "target_temperature",
        "current_temperature",
        "heating",
        "filtration",
        "waves",
    }
    target = points["target_temperature"]
    assert (target.kind, target.min_value, target.max_value, target.step) == (ControlPointKind.RANGE, 20, 40, 1)
    assert points["current_temperature"].writable is False
    assert points["waves"].kind is ControlPointKind.TOGGLE

    info = spa.device_info
    assert (info.manufacturer, info.model, info.serial_number) == ("Bestway", "Lay-Z", "DID-1")
