"""Bus and pin access for IT8951 panels on a Raspberry Pi."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

_SPIDEV_PATTERN = re.compile(r"spidev(\d+)\.(\d+)$")

LOW = 0
HIGH = 1


@dataclass(frozen=True)
class PinAssignment:
    """BCM GPIO numbers of the control lines."""

    reset: int = 17
    data_command: int = 25
    chip_select: int = 8
    busy: int = 24

    def outputs(self) -> tuple[int, int, int]:
        return (self.reset, self.data_command, self.chip_select)

    def all(self) -> list[int]:
        return [self.reset, self.data_command, self.chip_select, self.busy]


class PanelBus(Protocol):
    """Exclusive handle on the SPI device and control pins of one panel."""

    pins: PinAssignment

    def open(self) -> None:
        """Acquire the SPI device and configure the pins."""
        ...

    def close(self) -> None:
        """Release the SPI device and the pins. Must be safe to call twice."""
        ...

    def write_pin(self, pin: int, value: int) -> None:
        ...

    def read_pin(self, pin: int) -> int:
        ...

    def write(self, data: bytes) -> None:
        """Clock bytes out on the bus."""
        ...

    def read(self, length: int) -> bytes:
        """Clock bytes in from the bus."""
        ...


def parse_spi_device(device_path: str) -> tuple[int, int]:
    """Split a spidev path into (bus, device) numbers.

    Args:
        device_path: Path such as ``/dev/spidev0.0``

    Returns:
        Tuple of (bus, device)

    Raises:
        ValueError: If the path is not a spidev device
    """
    match = _SPIDEV_PATTERN.search(device_path)
    if not match:
        raise ValueError(f"Not a spidev device path: {device_path}")
    return int(match.group(1)), int(match.group(2))


class RaspberryPiBus:
    """PanelBus backed by ``spidev`` and ``RPi.GPIO``.

    Both libraries are imported when the bus is opened so that the package
    imports cleanly on machines without GPIO hardware.
    """

    def __init__(
        self,
        device_path: str = "/dev/spidev0.0",
        pins: Optional[PinAssignment] = None,
        speed_hz: int = 12_000_000,
    ) -> None:
        self.device_path = device_path
        self.pins = pins or PinAssignment()
        self.speed_hz = speed_hz
        self._spi: Optional[Any] = None
        self._gpio: Optional[Any] = None

    @property
    def is_open(self) -> bool:
        return self._spi is not None

    def open(self) -> None:
        if self.is_open:
            return

        import spidev  # type: ignore[import]  # noqa: PLC0415
        from RPi import GPIO  # type: ignore[import]  # noqa: PLC0415

        bus, device = parse_spi_device(self.device_path)

        GPIO.setmode(GPIO.BCM)
        GPIO.setwarnings(False)
        for pin in self.pins.outputs():
            GPIO.setup(pin, GPIO.OUT, initial=GPIO.HIGH)
        GPIO.setup(self.pins.busy, GPIO.IN)
        self._gpio = GPIO

        spi = spidev.SpiDev()
        try:
            spi.open(bus, device)
            spi.max_speed_hz = self.speed_hz
            spi.mode = 0b00
            # Chip select is driven from GPIO around each framed transaction
            spi.no_cs = True
        except Exception:
            spi.close()
            GPIO.cleanup(self.pins.all())
            self._gpio = None
            raise
        self._spi = spi

        logger.debug(f"Opened {self.device_path} at {self.speed_hz} Hz, pins {self.pins}")

    def close(self) -> None:
        spi, self._spi = self._spi, None
        gpio, self._gpio = self._gpio, None
        try:
            if spi is not None:
                spi.close()
        finally:
            if gpio is not None:
                gpio.cleanup(self.pins.all())
        logger.debug(f"Closed {self.device_path}")

    def _require_gpio(self) -> Any:
        if self._gpio is None:
            raise OSError(f"Bus {self.device_path} is not open")
        return self._gpio

    def _require_spi(self) -> Any:
        if self._spi is None:
            raise OSError(f"Bus {self.device_path} is not open")
        return self._spi

    def write_pin(self, pin: int, value: int) -> None:
        self._require_gpio().output(pin, value)

    def read_pin(self, pin: int) -> int:
        return int(self._require_gpio().input(pin))

    def write(self, data: bytes) -> None:
        self._require_spi().writebytes(list(data))

    def read(self, length: int) -> bytes:
        return bytes(self._require_spi().readbytes(length))
