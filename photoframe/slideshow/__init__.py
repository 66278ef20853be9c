"""Slideshow orchestration."""

from .selection import OrderingMode, parse_display_duration, parse_random_order, select_next_photo
from .service import (
    CycleResult,
    DisplayDecision,
    MissingArtifact,
    RetryState,
    SlideshowError,
    SlideshowService,
    resolve_artifact_path,
)

__all__ = [
    "CycleResult",
    "DisplayDecision",
    "MissingArtifact",
    "OrderingMode",
    "RetryState",
    "SlideshowError",
    "SlideshowService",
    "parse_display_duration",
    "parse_random_order",
    "resolve_artifact_path",
    "select_next_photo",
]
