"""State layer.

This package is the single owner of the device snapshot.  Polling and
command paths both go through :class:`DeviceStateCache`.
"""

from pylayzspa.state.cache import DeviceStateCache

__all__ = ["DeviceStateCache"]
