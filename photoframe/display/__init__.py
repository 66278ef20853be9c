"""E-paper panel drivers and geometry."""

from .exceptions import (
    BufferSizeMismatch,
    DeviceStateError,
    DisplayError,
    HardwareTimeout,
    InitializationFailure,
)
from .geometry import PanelGeometry, Region

__all__ = [
    "BufferSizeMismatch",
    "DeviceStateError",
    "DisplayError",
    "HardwareTimeout",
    "InitializationFailure",
    "PanelGeometry",
    "Region",
]
