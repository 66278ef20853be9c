"""Slideshow service keeping the panel supplied with photos."""

import asyncio
import functools
import logging
import random
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypeVar

from ..catalog.models import Photo, SettingKeys, utc_now
from ..catalog.protocol import PhotoCatalog
from ..config.settings import SlideshowConfiguration
from ..display.drivers.panel_driver import PanelDriver, RefreshMode
from ..display.exceptions import BufferSizeMismatch
from .selection import (
    ordering_mode,
    parse_display_duration,
    parse_random_order,
    select_next_photo,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FrameLoader = Callable[[Path], bytes]


class SlideshowError(Exception):
    """Base exception for slideshow errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingArtifact(SlideshowError):
    """Exception raised when a photo's prepared artifact is not on disk."""

    def __init__(self, photo_id: str, path: Path):
        super().__init__(f"Prepared artifact for photo {photo_id} not found: {path}")
        self.photo_id = photo_id
        self.path = path


class CycleResult(str, Enum):
    """Outcome of one successful slideshow cycle."""

    DISPLAYED = "displayed"
    EMPTY_LIBRARY = "empty_library"
    ARTIFACT_MISSING = "artifact_missing"


@dataclass(frozen=True)
class DisplayDecision:
    """Photo chosen for a cycle and the artifact that will be shown."""

    photo: Photo
    artifact_path: Path


@dataclass
class RetryState:
    """Consecutive failure count since the last successful cycle."""

    consecutive_failures: int = 0

    def record_failure(self) -> int:
        self.consecutive_failures += 1
        return self.consecutive_failures

    def reset(self) -> None:
        self.consecutive_failures = 0


def resolve_artifact_path(photo_root: Path, processed_path: str) -> Path:
    """Map a catalog artifact path onto the filesystem.

    Catalog paths are web-style (``/photos/processed/x.png``) and relative to
    the photo root. Absolute paths already under the photo root are kept.
    """
    candidate = Path(processed_path)
    if candidate.is_absolute():
        try:
            candidate.relative_to(photo_root)
            return candidate
        except ValueError:
            pass
    return photo_root / processed_path.lstrip("/\\")


class SlideshowService:
    """Supervised loop that selects photos and drives the panel.

    Every panel call runs on one dedicated worker thread, so the driver is
    never used concurrently. Catalog calls are awaited on the event loop
    between panel calls. Settings are read from the catalog every cycle.
    """

    def __init__(
        self,
        driver: PanelDriver,
        catalog: PhotoCatalog,
        frame_loader: FrameLoader,
        photo_root: Path,
        config: Optional[SlideshowConfiguration] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            driver: Panel driver, owned by the service once started
            catalog: Photo and settings store
            frame_loader: Reads a prepared artifact into a frame buffer
            photo_root: Directory catalog artifact paths are relative to
            config: Durations and defaults
            rng: Random source for random ordering
            clock: Source of display timestamps
        """
        self.driver = driver
        self.catalog = catalog
        self.frame_loader = frame_loader
        self.photo_root = Path(photo_root)
        self.config = config or SlideshowConfiguration()
        self.rng = rng or random.Random()
        self.clock = clock

        self.retry_state = RetryState()
        self.last_decision: Optional[DisplayDecision] = None
        self.cycle_count = 0

        self._executor: Optional[ThreadPoolExecutor] = None
        self._shutdown_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # Lifecycle

    async def start(self) -> None:
        """Initialize the panel and start the loop.

        Raises:
            SlideshowError: If the service is already running
            DisplayError: If the panel cannot be initialized
        """
        if self.is_running:
            raise SlideshowError("Slideshow is already running")

        self._shutdown_event = asyncio.Event()
        logger.info("Starting slideshow")
        try:
            await self._run_on_panel(self.driver.initialize)
        except Exception:
            logger.exception("Panel initialization failed, slideshow not started")
            self._shutdown_executor()
            raise

        self._task = asyncio.create_task(self._run_loop(), name="slideshow")

    def request_stop(self) -> None:
        """Ask the loop to stop at its next check. Safe to call from signal handlers."""
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    async def wait_until_stopped(self) -> None:
        """Wait for the loop to exit after a stop request."""
        if self._task is not None:
            await self._task

    async def stop(self) -> None:
        """Stop the loop and shut down the panel.

        A panel operation already in progress is allowed to finish.
        """
        if self._task is None:
            return

        logger.info("Stopping slideshow")
        self.request_stop()
        try:
            await self._task
        except Exception:
            logger.exception("Slideshow loop ended with an error")
        finally:
            self._task = None
            try:
                await self._run_on_panel(self.driver.shutdown)
            finally:
                self._shutdown_executor()
        logger.info("Slideshow stopped")

    # Cycle

    async def run_cycle(self) -> CycleResult:
        """Run one select-load-refresh-record cycle.

        Raises:
            Exception: Any catalog, storage or panel failure
        """
        self.cycle_count += 1
        photos = await self.catalog.list_active_photos()
        if not photos:
            logger.info("No active photos, clearing panel")
            await self._run_on_panel(self.driver.clear)
            return CycleResult.EMPTY_LIBRARY

        random_order = parse_random_order(
            await self.catalog.get_setting(SettingKeys.ENABLE_RANDOM_ORDER),
            self.config.default_random_order,
        )
        mode = ordering_mode(random_order)
        photo = select_next_photo(photos, mode, self.rng)

        try:
            decision = self.decide(photo)
        except MissingArtifact as e:
            logger.warning(f"{e.message}; marking photo inactive")
            await self.catalog.mark_inactive(photo.id)
            return CycleResult.ARTIFACT_MISSING

        logger.info(f"Displaying '{photo.name}' ({photo.id}) from {decision.artifact_path} [{mode.value}]")
        loop = asyncio.get_running_loop()
        buffer = await loop.run_in_executor(None, self.frame_loader, decision.artifact_path)
        await self._run_on_panel(self._show_frame, buffer)

        await self.catalog.record_display(photo.id, self.clock())
        self.last_decision = decision
        return CycleResult.DISPLAYED

    def decide(self, photo: Photo) -> DisplayDecision:
        """Resolve the artifact for a selected photo.

        Raises:
            MissingArtifact: If the artifact file does not exist
        """
        path = resolve_artifact_path(self.photo_root, photo.processed_path)
        if not path.is_file():
            raise MissingArtifact(photo.id, path)
        return DisplayDecision(photo=photo, artifact_path=path)

    async def display_duration(self) -> int:
        """Current display duration in seconds, read fresh from the catalog.

        A failed read is logged and falls back to the configured default.
        """
        try:
            raw = await self.catalog.get_setting(SettingKeys.DISPLAY_DURATION_SECONDS)
        except Exception as e:
            logger.warning(f"Could not read display duration, using default: {e}")
            raw = None
        return parse_display_duration(
            raw,
            self.config.default_display_duration,
            self.config.min_display_duration,
        )

    def _show_frame(self, buffer: bytes) -> None:
        self.driver.load_frame(buffer)
        self.driver.refresh_full(RefreshMode.GC16)

    async def _run_loop(self) -> None:
        assert self._shutdown_event is not None
        while not self._shutdown_event.is_set():
            try:
                result = await self.run_cycle()
            except BufferSizeMismatch as e:
                logger.critical(f"Frame buffer does not match panel geometry: {e.message}")
                delay = self._record_failure()
            except Exception:
                logger.exception("Slideshow cycle failed")
                delay = self._record_failure()
            else:
                self.retry_state.reset()
                delay = 0 if result is CycleResult.ARTIFACT_MISSING else await self.display_duration()

            if delay > 0:
                await self._wait(delay)

        logger.debug("Slideshow loop exited")

    def _record_failure(self) -> float:
        failures = self.retry_state.record_failure()
        backoff = self.config.error_backoff
        logger.warning(f"{failures} consecutive cycle failure(s), retrying in {backoff} s")
        return backoff

    async def _wait(self, seconds: float) -> None:
        """Sleep until the timeout or a stop request, whichever comes first."""
        assert self._shutdown_event is not None
        try:
            await asyncio.wait_for(self._shutdown_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass

    # Panel worker

    def _panel_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="panel")
        return self._executor

    async def _run_on_panel(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._panel_executor(), functools.partial(func, *args))

    def _shutdown_executor(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
