"""pylayzspa - Async Python client and control engine for Lay-Z-Spa hot tubs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pylayzspa")
except PackageNotFoundError:
    __version__ = "0+local"
from pylayzspa.client import LayzClient, RemoteClient
from pylayzspa.config import LayzConfig
from pylayzspa.exceptions import (
    LayzConfigError,
    LayzContractError,
    LayzError,
    LayzRemoteRejectedError,
    LayzSafetyAbortError,
    LayzTransportError,
)
from pylayzspa.interlock import InterlockStep, SafetyInterlock
from pylayzspa.models import (
    AttributePatch,
    CommandAck,
    ControlPoint,
    ControlPointKind,
    DeviceAttributes,
    DeviceInfo,
    DeviceState,
    FiltrationHeatingState,
    HeaterActivity,
)
from pylayzspa.state import DeviceStateCache
from pylayzspa.surface import SpaControlSurface

__all__ = [
    "__version__",
    "AttributePatch",
    "CommandAck",
    "ControlPoint",
    "ControlPointKind",
    "DeviceAttributes",
    "DeviceInfo",
    "DeviceState",
    "DeviceStateCache",
    "FiltrationHeatingState",
    "HeaterActivity",
    "InterlockStep",
    "LayzClient",
    "LayzConfig",
    "LayzConfigError",
    "LayzContractError",
    "LayzError",
    "LayzRemoteRejectedError",
    "LayzSafetyAbortError",
    "LayzTransportError",
    "RemoteClient",
    "SafetyInterlock",
    "SpaControlSurface",
]
