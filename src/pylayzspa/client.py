"""High-level async client for the Gizwits device API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pylayzspa._api import device as _device_api
from pylayzspa._transport import HttpTransport, Transport
from pylayzspa.config import LayzConfig
from pylayzspa.exceptions import LayzError
from pylayzspa.models.attributes import DeviceAttributes
from pylayzspa.models.control import AttributePatch, CommandAck

_logger = logging.getLogger(__name__)


class RemoteClient(Protocol):
    """What the cache and the interlock need from a remote client."""

    async def fetch_latest(self) -> DeviceAttributes:
        ...

    async def push_attributes(self, patch: AttributePatch | Mapping[str, Any]) -> CommandAck:
        ...


class LayzClient:
    """Async client for one spa on the Gizwits cloud.

    Usage::

        async with LayzClient(config) as client:
            attributes = await client.fetch_latest()
            await client.push_attributes({"temp_set": 38})

    Failures raise :class:`~pylayzspa.exceptions.LayzTransportError`,
    :class:`~pylayzspa.exceptions.LayzRemoteRejectedError` or
    :class:`~pylayzspa.exceptions.LayzContractError`; callers decide
    whether to absorb them.
    """

    def __init__(
        self,
        config: LayzConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    @property
    def config(self) -> LayzConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LayzClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise LayzError("Client not initialized. Use 'async with LayzClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def fetch_latest(self) -> DeviceAttributes:
        """Fetch the device's latest attribute set."""
        return await _device_api.fetch_latest(self._config, self._require_transport())

    async def push_attributes(self, patch: AttributePatch | Mapping[str, Any]) -> CommandAck:
        """Change the given attributes on the device."""
        return await _device_api.push_attributes(self._config, self._require_transport(), patch)
