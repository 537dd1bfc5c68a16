"""Data models for Gizwits API payloads and the cached device state."""

from pylayzspa.models._base import EpochTimestamp, LayzBaseModel, parse_epoch_timestamp
from pylayzspa.models.attributes import DeviceAttributes
from pylayzspa.models.control import (
    AttributePatch,
    CommandAck,
    ControlPoint,
    ControlPointKind,
    DeviceInfo,
    HeaterActivity,
)
from pylayzspa.models.state import DeviceState, FiltrationHeatingState

__all__ = [
    "AttributePatch",
    "CommandAck",
    "ControlPoint",
    "ControlPointKind",
    "DeviceAttributes",
    "DeviceInfo",
    "DeviceState",
    "EpochTimestamp",
    "FiltrationHeatingState",
    "HeaterActivity",
    "LayzBaseModel",
    "parse_epoch_timestamp",
]
