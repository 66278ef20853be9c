"""CLI mode handlers."""

from .panel import create_driver, run_clear_mode
from .prepare import run_import_mode, run_prepare_mode
from .slideshow import run_slideshow_mode

__all__ = [
    "create_driver",
    "run_clear_mode",
    "run_import_mode",
    "run_prepare_mode",
    "run_slideshow_mode",
]
