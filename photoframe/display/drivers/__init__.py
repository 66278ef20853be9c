"""Panel drivers."""

from .panel_driver import DeviceState, PanelDriver, RefreshMode

__all__ = ["DeviceState", "PanelDriver", "RefreshMode"]
