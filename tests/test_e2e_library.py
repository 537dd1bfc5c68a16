from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pylayzspa import (
    LayzClient,
    LayzConfig,
    LayzRemoteRejectedError,
    LayzSafetyAbortError,
    SpaControlSurface,
)


@dataclass
class FakeGizwitsBackend:
    device_id: str = "DID-E2E-1"
    attr: dict[str, int] = field(
        default_factory=lambda: {
            "power": 1,
            "temp_now": 30,
            "temp_set": 36,
            "heat_power": 0,
            "filter_power": 0,
            "wave_power": 0,
        }
    )
    online: bool = True
    reject_attrs: set[str] = field(default_factory=set)
    requests: list[tuple[str, str, dict[str, Any] | None]] = field(default_factory=list)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.requests.append((method, endpoint, dict(body) if body is not None else None))

        if method == "GET" and endpoint == f"/devdata/{self.device_id}/latest":
            attr = dict(self.attr) if self.online else {}
            return {"did": self.device_id, "updated_at": 1771000000, "attr": attr}

        if method == "POST" and endpoint == f"/control/{self.device_id}":
            assert body is not None
            attrs = body["attrs"]
            if self.reject_attrs & set(attrs):
                raise LayzRemoteRejectedError("HTTP 500", status_code=500, endpoint=endpoint)
            self.attr.update(attrs)
            return {}

        raise AssertionError(f"Unexpected request in fake backend: {method} {endpoint}")

    def pushes(self) -> list[dict[str, int]]:
        return [body["attrs"] for method, _endpoint, body in self.requests if method == "POST" and body]


@pytest.fixture
def config() -> LayzConfig:
    return LayzConfig(api_token="token-e2e", device_id="DID-E2E-1", poll_interval=0.01)


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeGizwitsBackend:
    fake_backend = FakeGizwitsBackend()

    async def fake_request_json(
        _self: Any,
        method: str,
        endpoint: str,
        body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await fake_backend.request_json(method, endpoint, body)

    monkeypatch.setattr("pylayzspa._transport.HttpTransport.request_json", fake_request_json)
    return fake_backend


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_happy_path_exercises_full_library(config: LayzConfig, backend: FakeGizwitsBackend) -> None:
    async with LayzClient(config) as client:
        spa = SpaControlSurface(client, config)
        state = await spa.poll_once()
        assert state.target_temp == 36
        assert spa.read_current_temperature() == 30

        await spa.write_target_temperature(38)
        await spa.write_heating_state(True)
        await spa.write_wave_state(True)

        assert spa.read_target_temperature() == 38
        assert spa.read_heating_state() is True
        assert spa.read_filtration_state() is True
        assert spa.read_wave_state() is True

        await spa.write_filtration_state(False)
        assert spa.read_heating_state() is False
        assert spa.read_filtration_state() is False

    assert backend.pushes() == [
        {"temp_set": 38},
        {"filter_power": 1},
        {"heat_power": 1},
        {"wave_power": 1},
        {"heat_power": 0},
        {"filter_power": 0},
    ]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_filtration_rejected_never_sends_heater(config: LayzConfig, backend: FakeGizwitsBackend) -> None:
    backend.reject_attrs.add("filter_power")

    async with LayzClient(config) as client:
        spa = SpaControlSurface(client, config)
        with pytest.raises(LayzSafetyAbortError):
            await spa.write_heating_state(True)

        assert spa.read_heating_state() is False

    assert backend.pushes() == [{"filter_power": 1}]


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_offline_device_reads_idle(config: LayzConfig, backend: FakeGizwitsBackend) -> None:
    backend.online = False

    async with LayzClient(config) as client, SpaControlSurface(client, config) as spa:
        await spa.poll_once()
        state = spa.read_state()

    assert state.online is False
    assert state.target_temp == 25
    assert state.power is False
