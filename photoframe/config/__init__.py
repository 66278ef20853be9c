"""Configuration management."""

from .settings import (
    LoggingSettings,
    PanelConfiguration,
    PhotoFrameSettings,
    SlideshowConfiguration,
    get_settings,
    reset_settings,
)

__all__ = [
    "LoggingSettings",
    "PanelConfiguration",
    "PhotoFrameSettings",
    "SlideshowConfiguration",
    "get_settings",
    "reset_settings",
]
