"""Device endpoints.

Endpoints:
  - GET  /devdata/{did}/latest
  - POST /control/{did}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pylayzspa._transport import Transport
from pylayzspa.config import LayzConfig
from pylayzspa.exceptions import LayzContractError
from pylayzspa.models.attributes import DeviceAttributes
from pylayzspa.models.control import AttributePatch, CommandAck

_logger = logging.getLogger(__name__)


def latest_endpoint(device_id: str) -> str:
    return f"/devdata/{device_id}/latest"


def control_endpoint(device_id: str) -> str:
    return f"/control/{device_id}"


async def fetch_latest(config: LayzConfig, transport: Transport) -> DeviceAttributes:
    """Read the device's current attributes."""
    endpoint = latest_endpoint(config.device_id)
    response = await transport.request_json("GET", endpoint)
    try:
        attributes = DeviceAttributes.model_validate(response)
    except ValidationError as exc:
        raise LayzContractError(f"Unexpected attribute payload from {endpoint}: {exc}", endpoint=endpoint) from exc
    _logger.debug(
        "Fetched attributes did=%s online=%s attrs=%s",
        config.device_id,
        attributes.is_online,
        attributes.model_dump(exclude={"raw"}),
    )
    return attributes


async def push_attributes(
    config: LayzConfig,
    transport: Transport,
    patch: AttributePatch | Mapping[str, Any],
) -> CommandAck:
    """Send a partial attribute update; untouched attributes stay as they are."""
    if not isinstance(patch, AttributePatch):
        patch = AttributePatch.model_validate(dict(patch))
    endpoint = control_endpoint(config.device_id)
    attrs = patch.to_attrs()
    response = await transport.request_json("POST", endpoint, {"attrs": attrs})
    _logger.debug("Pushed attributes did=%s attrs=%s", config.device_id, attrs)
    return CommandAck(attrs=attrs, raw=response)
