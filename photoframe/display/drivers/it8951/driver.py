"""IT8951 e-paper controller driver."""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from ....utils.logging import VERBOSE
from ...exceptions import (
    BufferSizeMismatch,
    DeviceStateError,
    DisplayError,
    HardwareTimeout,
    InitializationFailure,
)
from ...geometry import PanelGeometry, Region
from ..panel_driver import DeviceState, RefreshMode
from .bus import HIGH, LOW, PanelBus
from .commands import IT8951_SPI, BusFraming, CommandTable
from .utils import (
    delay_ms,
    iter_chunks,
    pack_words,
    unpack_words,
    validate_buffer_size,
    vcom_to_millivolts,
    words_to_string,
)

logger = logging.getLogger(__name__)

# Display constants
WHITE = 0xFF
DEVICE_INFO_WORDS = 20
RESET_HOLD_MS = 100
I80CPCR_PACKED_WRITE = 0x0001


@dataclass(frozen=True)
class DeviceInfo:
    """Identification block reported by the controller."""

    panel_width: int
    panel_height: int
    image_buffer_address: int
    firmware_version: str
    lut_version: str

    @classmethod
    def from_words(cls, words: list[int]) -> "DeviceInfo":
        """Decode the GET_DEV_INFO response.

        Layout: width, height, buffer address low, buffer address high,
        8 words of firmware version, 8 words of LUT version.
        """
        if len(words) < DEVICE_INFO_WORDS:
            raise ValueError(f"Device info needs {DEVICE_INFO_WORDS} words, got {len(words)}")
        return cls(
            panel_width=words[0],
            panel_height=words[1],
            image_buffer_address=(words[3] << 16) | words[2],
            firmware_version=words_to_string(words[4:12]),
            lut_version=words_to_string(words[12:20]),
        )


class IT8951Driver:
    """Driver for panels behind an IT8951 controller.

    One instance owns one :class:`PanelBus` exclusively. The controller
    variant is selected by the ``command_table`` value; all variants share
    this implementation.

    The driver is not thread-safe. Callers must issue every operation from a
    single worker.
    """

    def __init__(
        self,
        geometry: PanelGeometry,
        vcom: float,
        bus: PanelBus,
        command_table: CommandTable = IT8951_SPI,
        chunk_size: int = 4096,
        busy_timeout: float = 10.0,
        busy_poll_interval: float = 0.01,
        busy_active_high: bool = True,
    ) -> None:
        """Initialize the driver.

        Args:
            geometry: Panel resolution, fixed for the driver's lifetime
            vcom: Panel bias voltage printed on the FPC cable (e.g. -1.53)
            bus: SPI/GPIO access for this panel
            command_table: Controller variant
            chunk_size: Maximum bytes per framed data write while streaming pixels
            busy_timeout: Seconds to wait for the busy line before giving up
            busy_poll_interval: Seconds between busy line samples
            busy_active_high: True when the controller drives the busy line high while busy
        """
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        self.geometry = geometry
        self.vcom = vcom
        self._vcom_millivolts = vcom_to_millivolts(vcom)
        self.bus = bus
        self.command_table = command_table
        self.chunk_size = chunk_size
        self.busy_timeout = busy_timeout
        self.busy_poll_interval = busy_poll_interval
        self.busy_active_high = busy_active_high

        self._state = DeviceState.UNINITIALIZED
        self._bus_open = False
        self.device_info: Optional[DeviceInfo] = None

    @property
    def state(self) -> DeviceState:
        return self._state

    # Lifecycle

    def initialize(self) -> None:
        """Reset the controller, read its identification and program VCOM.

        Raises:
            DeviceStateError: If the driver is not UNINITIALIZED
            HardwareTimeout: If the busy line never clears
            InitializationFailure: If the bus cannot be opened or a write fails
        """
        if self._state is not DeviceState.UNINITIALIZED:
            raise DeviceStateError("initialize", self._state.value)

        logger.info(
            f"Initializing {self.command_table.name} panel "
            f"{self.geometry.width}x{self.geometry.height}, VCOM {self.vcom} V"
        )

        try:
            self.bus.open()
            self._bus_open = True

            self._hardware_reset()
            self._send_command(self.command_table.sys_run)
            self._wait_until_idle()

            self.device_info = self._read_device_info()
            self._check_device_info(self.device_info)

            # Enable packed pixel writes
            self._write_register(self.command_table.reg_i80cpcr, I80CPCR_PACKED_WRITE)
            self._set_vcom()
        except DisplayError:
            self._release_bus()
            raise
        except Exception as e:
            self._release_bus()
            raise InitializationFailure(f"Panel initialization failed: {e}") from e

        self._state = DeviceState.RUNNING
        logger.info("Panel initialized")

    def standby(self) -> None:
        """Put the controller into standby (RUNNING -> STANDBY)."""
        self._require_running("enter standby")
        logger.info("Entering standby")
        self._send_command(self.command_table.standby)
        self._wait_until_idle()
        self._state = DeviceState.STANDBY

    def wake(self) -> None:
        """Return from standby or sleep to RUNNING.

        A sleeping controller needs a hardware reset before it accepts
        SYS_RUN again.
        """
        if self._state is DeviceState.RUNNING:
            return
        if self._state not in (DeviceState.STANDBY, DeviceState.SLEEPING):
            raise DeviceStateError("wake", self._state.value)

        logger.info(f"Waking panel from {self._state.value}")
        if self._state is DeviceState.SLEEPING:
            self._hardware_reset()
        self._send_command(self.command_table.sys_run)
        self._wait_until_idle()
        self._state = DeviceState.RUNNING

    def enter_sleep(self) -> None:
        """Put the controller to sleep.

        Calling this when the driver is not RUNNING does nothing.
        """
        if self._state is not DeviceState.RUNNING:
            logger.debug(f"Sleep requested while {self._state.value}, ignoring")
            return

        logger.info("Entering sleep mode")
        self._send_command(self.command_table.sleep)
        self._wait_until_idle()
        self._state = DeviceState.SLEEPING

    def shutdown(self) -> None:
        """Sleep best-effort, then release the bus unconditionally."""
        logger.info("Shutting down panel driver")
        try:
            self.enter_sleep()
        except Exception:
            logger.exception("Failed to put panel to sleep during shutdown")
        finally:
            self._release_bus()
            self._state = DeviceState.UNINITIALIZED

    # Frame operations

    def load_frame(self, buffer: bytes) -> None:
        """Stream a full-panel frame buffer into controller memory.

        Args:
            buffer: One byte per pixel, row-major, ``width * height`` long

        Raises:
            DeviceStateError: If the driver is not RUNNING
            BufferSizeMismatch: If the buffer length does not match the geometry
            HardwareTimeout: If the busy line never clears
        """
        self._require_running("load frame")
        expected = self.geometry.pixel_count
        if not validate_buffer_size(buffer, expected):
            raise BufferSizeMismatch(expected, len(buffer))

        table = self.command_table
        if self.device_info is not None:
            address = self.device_info.image_buffer_address
            self._write_register(table.reg_lisar + 2, (address >> 16) & 0xFFFF)
            self._write_register(table.reg_lisar, address & 0xFFFF)

        logger.debug(f"Loading {len(buffer)} byte frame in chunks of {self.chunk_size}")
        self._send_command(table.load_image)
        self._send_data(pack_words(0, 0, self.geometry.width, self.geometry.height))
        for chunk in iter_chunks(buffer, self.chunk_size):
            self._send_data(chunk)
        self._send_command(table.load_image_end)
        self._wait_until_idle()

    def refresh_area(self, x: int, y: int, width: int, height: int, mode: RefreshMode) -> None:
        """Refresh a rectangle of the panel from controller memory.

        Raises:
            DeviceStateError: If the driver is not RUNNING
            ValueError: If the rectangle is off-panel or the mode is unsupported
            HardwareTimeout: If the busy line never clears
        """
        self._require_running("refresh")
        region = Region(x, y, width, height)
        if not region.fits_within(self.geometry):
            raise ValueError(f"{region} does not fit a {self.geometry.width}x{self.geometry.height} panel")
        code = self.command_table.refresh_code(mode)

        logger.debug(f"Refreshing {region} with {mode.value}")
        self._send_command(self.command_table.display_area)
        self._send_data(pack_words(x, y, width, height, code))
        self._wait_until_idle()

    def refresh_full(self, mode: RefreshMode = RefreshMode.GC16) -> None:
        self.refresh_area(0, 0, self.geometry.width, self.geometry.height, mode)

    def clear(self) -> None:
        """Wipe the panel to white with the INIT waveform."""
        self._require_running("clear")
        logger.info("Clearing panel")
        self.load_frame(bytes([WHITE]) * self.geometry.pixel_count)
        self.refresh_full(RefreshMode.INIT)

    # Protocol helpers

    def _require_running(self, operation: str) -> None:
        if self._state is not DeviceState.RUNNING:
            raise DeviceStateError(operation, self._state.value)

    def _hardware_reset(self) -> None:
        logger.debug("Hardware reset")
        pins = self.bus.pins
        self.bus.write_pin(pins.reset, LOW)
        delay_ms(RESET_HOLD_MS)
        self.bus.write_pin(pins.reset, HIGH)
        delay_ms(RESET_HOLD_MS)
        self._wait_until_idle()

    def _is_busy(self) -> bool:
        level = self.bus.read_pin(self.bus.pins.busy)
        return level == (HIGH if self.busy_active_high else LOW)

    def _wait_until_idle(self) -> None:
        """Poll the busy line until the controller is ready.

        Raises:
            HardwareTimeout: If the line stays busy for longer than ``busy_timeout``
        """
        started = time.monotonic()
        deadline = started + self.busy_timeout
        polls = 0
        while self._is_busy():
            if time.monotonic() >= deadline:
                raise HardwareTimeout(
                    f"Panel busy for more than {self.busy_timeout} s", timeout=self.busy_timeout
                )
            time.sleep(self.busy_poll_interval)
            polls += 1
        if polls:
            elapsed_ms = (time.monotonic() - started) * 1000
            logger.log(VERBOSE, f"Busy wait took {elapsed_ms:.0f} ms over {polls} poll(s)")

    def _transaction(self, is_command: bool, payload: bytes) -> None:
        """Write one framed transaction under chip select."""
        self._wait_until_idle()
        pins = self.bus.pins
        table = self.command_table
        if table.framing is BusFraming.DATA_COMMAND_PIN:
            self.bus.write_pin(pins.data_command, LOW if is_command else HIGH)
            self.bus.write_pin(pins.chip_select, LOW)
            try:
                self.bus.write(payload)
            finally:
                self.bus.write_pin(pins.chip_select, HIGH)
            return

        preamble = table.command_preamble if is_command else table.data_preamble
        self.bus.write_pin(pins.chip_select, LOW)
        try:
            self.bus.write(pack_words(preamble))
            self.bus.write(payload)
        finally:
            self.bus.write_pin(pins.chip_select, HIGH)

    def _send_command(self, command: int) -> None:
        logger.debug(f"Command 0x{command:04X}")
        self._transaction(True, pack_words(command))

    def _send_data(self, data: bytes) -> None:
        self._transaction(False, data)

    def _read_words(self, count: int) -> list[int]:
        """Read a block of words following a command that produces a response."""
        self._wait_until_idle()
        pins = self.bus.pins
        table = self.command_table
        if table.framing is BusFraming.DATA_COMMAND_PIN:
            self.bus.write_pin(pins.data_command, HIGH)
            self.bus.write_pin(pins.chip_select, LOW)
            try:
                return unpack_words(self.bus.read(count * 2))
            finally:
                self.bus.write_pin(pins.chip_select, HIGH)

        self.bus.write_pin(pins.chip_select, LOW)
        try:
            self.bus.write(pack_words(table.read_preamble))
            # First word after the read preamble is a dummy
            self.bus.read(2)
            return unpack_words(self.bus.read(count * 2))
        finally:
            self.bus.write_pin(pins.chip_select, HIGH)

    def _write_register(self, register: int, value: int) -> None:
        self._send_command(self.command_table.reg_write)
        self._send_data(pack_words(register, value))

    def _read_device_info(self) -> DeviceInfo:
        self._send_command(self.command_table.get_device_info)
        info = DeviceInfo.from_words(self._read_words(DEVICE_INFO_WORDS))
        logger.info(
            f"Device info: {info.panel_width}x{info.panel_height}, "
            f"buffer 0x{info.image_buffer_address:08X}, "
            f"firmware '{info.firmware_version}', LUT '{info.lut_version}'"
        )
        return info

    def _check_device_info(self, info: DeviceInfo) -> None:
        if (info.panel_width, info.panel_height) != self.geometry.size:
            logger.warning(
                f"Controller reports {info.panel_width}x{info.panel_height}, "
                f"configured geometry is {self.geometry.width}x{self.geometry.height}"
            )

    def _set_vcom(self) -> None:
        logger.info(f"Setting VCOM to {self.vcom} V ({self._vcom_millivolts} mV)")
        self._send_command(self.command_table.vcom)
        self._send_data(pack_words(self.command_table.vcom_set, self._vcom_millivolts))
        self._wait_until_idle()

    def _release_bus(self) -> None:
        if not self._bus_open:
            return
        self._bus_open = False
        try:
            self.bus.close()
        except Exception:
            logger.exception("Failed to release panel bus")
