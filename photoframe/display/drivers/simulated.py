"""Simulated panel driver that renders refreshed frames to a PNG file."""

import logging
from pathlib import Path
from typing import Optional

from PIL import Image

from ..exceptions import BufferSizeMismatch, DeviceStateError
from ..geometry import PanelGeometry, Region
from .it8951.utils import validate_buffer_size
from .panel_driver import DeviceState, RefreshMode

logger = logging.getLogger(__name__)

WHITE = 0xFF


class SimulatedPanelDriver:
    """Panel driver for development machines without e-paper hardware.

    Honours the same state machine and buffer checks as the hardware driver.
    Each refresh copies the refreshed region of the loaded frame onto an
    in-memory panel image and saves it to ``output_path``.
    """

    def __init__(self, geometry: PanelGeometry, output_path: Path) -> None:
        self.geometry = geometry
        self.output_path = Path(output_path)
        self._state = DeviceState.UNINITIALIZED
        self._frame: Optional[bytes] = None
        self._panel: Optional[Image.Image] = None
        self.refresh_count = 0
        self.last_mode: Optional[RefreshMode] = None

    @property
    def state(self) -> DeviceState:
        return self._state

    @property
    def panel_image(self) -> Optional[Image.Image]:
        """What the simulated panel currently shows."""
        return self._panel

    def initialize(self) -> None:
        if self._state is not DeviceState.UNINITIALIZED:
            raise DeviceStateError("initialize", self._state.value)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._panel = Image.new("L", self.geometry.size, WHITE)
        self._state = DeviceState.RUNNING
        logger.info(
            f"Simulated panel {self.geometry.width}x{self.geometry.height} initialized, "
            f"rendering to {self.output_path}"
        )

    def load_frame(self, buffer: bytes) -> None:
        self._require_running("load frame")
        expected = self.geometry.pixel_count
        if not validate_buffer_size(buffer, expected):
            raise BufferSizeMismatch(expected, len(buffer))
        self._frame = bytes(buffer)

    def refresh_area(self, x: int, y: int, width: int, height: int, mode: RefreshMode) -> None:
        self._require_running("refresh")
        region = Region(x, y, width, height)
        if not region.fits_within(self.geometry):
            raise ValueError(f"{region} does not fit a {self.geometry.width}x{self.geometry.height} panel")
        if self._frame is None or self._panel is None:
            raise DeviceStateError("refresh before a frame is loaded", self._state.value)

        frame = Image.frombytes("L", self.geometry.size, self._frame)
        box = (x, y, x + width, y + height)
        self._panel.paste(frame.crop(box), box)
        self._panel.save(self.output_path, "PNG")
        self.refresh_count += 1
        self.last_mode = mode
        logger.debug(f"Simulated refresh {self.refresh_count} of {region} with {mode.value}")

    def refresh_full(self, mode: RefreshMode = RefreshMode.GC16) -> None:
        self.refresh_area(0, 0, self.geometry.width, self.geometry.height, mode)

    def clear(self) -> None:
        self._require_running("clear")
        self.load_frame(bytes([WHITE]) * self.geometry.pixel_count)
        self.refresh_full(RefreshMode.INIT)

    def enter_sleep(self) -> None:
        if self._state is not DeviceState.RUNNING:
            return
        self._state = DeviceState.SLEEPING
        logger.info("Simulated panel sleeping")

    def shutdown(self) -> None:
        self.enter_sleep()
        self._frame = None
        self._state = DeviceState.UNINITIALIZED

    def _require_running(self, operation: str) -> None:
        if self._state is not DeviceState.RUNNING:
            raise DeviceStateError(operation, self._state.value)
