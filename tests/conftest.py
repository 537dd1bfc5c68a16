from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from pylayzspa.config import LayzConfig
from pylayzspa.models.attributes import DeviceAttributes
from pylayzspa.models.control import AttributePatch, CommandAck


def _default_attrs() -> dict[str, int]:
    return {
        "power": 1,
        "temp_now": 31,
        "temp_set": 35,
        "heat_power": 0,
        "filter_power": 0,
        "wave_power": 0,
    }


@dataclass
class FakeSpaCloud:
    """In-memory stand-in for :class:`pylayzspa.client.LayzClient`."""

    attrs: dict[str, int] = field(default_factory=_default_attrs)
    online: bool = True
    calls: list[str] = field(default_factory=list)
    pushes: list[dict[str, int]] = field(default_factory=list)
    fetch_error: Exception | None = None
    push_errors: dict[str, Exception] = field(default_factory=dict)
    push_gate: asyncio.Event | None = None
    heater_without_filtration: int = 0

    async def fetch_latest(self) -> DeviceAttributes:
        self.calls.append("fetch")
        if self.fetch_error is not None:
            raise self.fetch_error
        attr = dict(self.attrs) if self.online else {}
        return DeviceAttributes.model_validate({"did": "DID-1", "updated_at": 1771000000, "attr": attr})

    async def push_attributes(self, patch: AttributePatch | Mapping[str, Any]) -> CommandAck:
        if not isinstance(patch, AttributePatch):
            patch = AttributePatch.model_validate(dict(patch))
        attrs = patch.to_attrs()
        self.calls.append("push " + ",".join(f"{k}={v}" for k, v in attrs.items()))
        self.pushes.append(attrs)
        if self.push_gate is not None:
            await self.push_gate.wait()
        for key in attrs:
            if key in self.push_errors:
                raise self.push_errors[key]
        self.attrs.update(attrs)
        if self.attrs.get("heat_power") and not self.attrs.get("filter_power"):
            self.heater_without_filtration += 1
        return CommandAck(attrs=attrs)


@dataclass
class FakeClock:
    now: datetime = field(default_factory=lambda: datetime(2026, 1, 1, 12, 0, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def cloud() -> FakeSpaCloud:
    return FakeSpaCloud()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> LayzConfig:
    return LayzConfig(api_token="token-1", device_id="DID-1", poll_interval=0.01)


async def wait_until(predicate: Callable[[], Any], *, attempts: int = 200, interval: float = 0.0) -> None:
    """Yield to the loop until *predicate* is truthy."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(interval)
    raise AssertionError("condition not reached")
