"""Slideshow mode handler."""

import asyncio
import logging
import signal
from typing import Any

from ...catalog.database import CatalogError, SqlitePhotoCatalog
from ...config.settings import PhotoFrameSettings
from ...imaging.processor import ImageProcessor
from ...slideshow.service import SlideshowService
from .panel import create_driver

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, service: SlideshowService) -> None:
    def handle_signal(signum: int) -> None:
        logger.info(f"Received signal {signum}, stopping slideshow")
        service.request_stop()

    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, handle_signal, sig)
        except NotImplementedError:
            # Event loops without signal support (e.g. Windows)
            signal.signal(sig, lambda signum, _frame: loop.call_soon_threadsafe(handle_signal, signum))


def _remove_signal_handlers(loop: asyncio.AbstractEventLoop) -> None:
    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.remove_signal_handler(sig)
        except NotImplementedError:
            signal.signal(sig, signal.SIG_DFL)


async def run_slideshow_mode(args: Any, settings: PhotoFrameSettings) -> int:
    """Run the slideshow until SIGINT or SIGTERM.

    Returns:
        Exit code (0 for a clean stop, 1 if startup fails)
    """
    driver = create_driver(settings, getattr(args, "simulate", False))
    catalog = SqlitePhotoCatalog(settings.database_file)
    try:
        await catalog.initialize()
    except CatalogError as e:
        logger.error(e.message)
        return 1

    processor = ImageProcessor(driver.geometry)
    service = SlideshowService(
        driver,
        catalog,
        processor.load_frame_buffer,
        settings.photo_directory,
        config=settings.slideshow,
    )

    try:
        await service.start()
    except Exception as e:
        logger.critical(f"Slideshow could not start: {e}")
        return 1

    loop = asyncio.get_running_loop()
    _install_signal_handlers(loop, service)
    try:
        await service.wait_until_stopped()
    finally:
        await service.stop()
        _remove_signal_handlers(loop)
    return 0
