"""Time-windowed cache of the device state."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from pylayzspa._constants import CACHE_TTL_SECONDS
from pylayzspa.client import RemoteClient
from pylayzspa.exceptions import LayzError
from pylayzspa.ingestion.apply import attributes_to_state
from pylayzspa.models.state import DeviceState

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DeviceStateCache:
    """Owns the single :class:`DeviceState` of one device.

    Reads never touch the network.  :meth:`refresh` contacts the cloud only
    when forced or when the last successful fetch is older than the TTL.
    The cache does not serialize callers itself; whoever races polls
    against writes must hold one lock around both (see
    :class:`~pylayzspa.surface.SpaControlSurface`).
    """

    def __init__(
        self,
        client: RemoteClient,
        *,
        ttl: timedelta | float = CACHE_TTL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
        initial: DeviceState | None = None,
    ) -> None:
        self._client = client
        self._ttl = ttl if isinstance(ttl, timedelta) else timedelta(seconds=ttl)
        self._clock = clock
        self._state = initial if initial is not None else DeviceState.initial()
        self.fetch_count = 0
        self.failure_count = 0

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def read(self) -> DeviceState:
        """Return the current snapshot without network access."""
        return self._state

    def is_fresh(self) -> bool:
        """Whether a non-forced refresh would be served from the cache."""
        last_fetch = self._state.last_fetch
        if last_fetch is None:
            return False
        return self._clock() - last_fetch < self._ttl

    async def refresh(self, *, force: bool = False) -> DeviceState:
        """Fetch the latest attributes unless the snapshot is still fresh.

        Read failures are logged and the unchanged snapshot is returned.
        """
        if not force and self.is_fresh():
            _logger.debug("Last fetch at %s is within %s; using cached state", self._state.last_fetch, self._ttl)
            return self._state

        self.fetch_count += 1
        try:
            attributes = await self._client.fetch_latest()
        except LayzError as exc:
            self.failure_count += 1
            _logger.warning("Could not retrieve device status; keeping cached state: %s", exc)
            return self._state

        self._state = attributes_to_state(attributes, previous=self._state, fetched_at=self._clock())
        return self._state

    def apply_optimistic(self, patch: Mapping[str, Any]) -> DeviceState:
        """Write *patch* (``DeviceState`` field names) into the snapshot now.

        ``last_fetch`` is left alone, so the TTL still refers to the last
        confirmed read.  A patch that would leave heating on without
        filtration raises :class:`ValueError` and changes nothing.
        """
        if "last_fetch" in patch:
            raise ValueError("optimistic updates cannot change last_fetch")
        self._state = self._state.updated(**patch)
        _logger.debug("Optimistic update %s", dict(patch))
        return self._state

    def restore(self, snapshot: DeviceState) -> None:
        """Put back a snapshot taken before an optimistic update."""
        self._state = snapshot
