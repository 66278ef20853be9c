"""Test doubles for the panel bus and the photo catalog."""

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Optional

from photoframe.catalog.models import Photo
from photoframe.display.drivers.it8951.bus import HIGH, LOW, PinAssignment
from photoframe.display.drivers.it8951.utils import pack_words
from photoframe.display.geometry import PanelGeometry

SMALL_GEOMETRY = PanelGeometry(4, 3)
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def device_info_response(
    width: int,
    height: int,
    address: int = 0x001236E0,
    firmware: str = "SWv_0.1.1",
    lut: str = "M641",
    dummy: bool = True,
) -> bytes:
    """Bytes a controller returns for GET_DEV_INFO."""

    def text_words(text: str) -> list[int]:
        raw = text.encode("ascii").ljust(16, b"\x00")[:16]
        return [int.from_bytes(raw[i : i + 2], "big") for i in range(0, 16, 2)]

    words = [width, height, address & 0xFFFF, (address >> 16) & 0xFFFF]
    words += text_words(firmware) + text_words(lut)
    prefix = b"\x00\x00" if dummy else b""
    return prefix + pack_words(*words)


class FakeBus:
    """PanelBus that records every pin change and byte written.

    Writes made while chip select is low are grouped into transactions.
    """

    def __init__(
        self,
        pins: Optional[PinAssignment] = None,
        busy_level: int = LOW,
        read_data: bytes = b"",
    ) -> None:
        self.pins = pins or PinAssignment()
        self.busy_level = busy_level
        self.busy_sequence: list[int] = []
        self.read_queue = bytearray(read_data)
        self.events: list[tuple] = []
        self.transactions: list[list[bytes]] = []
        self.open_count = 0
        self.close_count = 0
        self.fail_open: Optional[Exception] = None
        self.fail_writes: Optional[Exception] = None
        self._current: Optional[list[bytes]] = None

    def open(self) -> None:
        if self.fail_open is not None:
            raise self.fail_open
        self.open_count += 1

    def close(self) -> None:
        self.close_count += 1

    def write_pin(self, pin: int, value: int) -> None:
        self.events.append(("pin", pin, value))
        if pin == self.pins.chip_select:
            if value == LOW:
                self._current = []
            elif self._current is not None:
                self.transactions.append(self._current)
                self._current = None

    def read_pin(self, pin: int) -> int:
        if pin == self.pins.busy:
            if self.busy_sequence:
                return self.busy_sequence.pop(0)
            return self.busy_level
        return HIGH

    def write(self, data: bytes) -> None:
        if self.fail_writes is not None:
            raise self.fail_writes
        self.events.append(("write", bytes(data)))
        if self._current is not None:
            self._current.append(bytes(data))

    def read(self, length: int) -> bytes:
        self.events.append(("read", length))
        chunk = bytes(self.read_queue[:length]).ljust(length, b"\x00")
        del self.read_queue[:length]
        return chunk

    def reset_recording(self) -> None:
        self.events.clear()
        self.transactions.clear()

    def pin_writes(self, pin: int) -> list[int]:
        return [event[2] for event in self.events if event[0] == "pin" and event[1] == pin]


class FakeCatalog:
    """In-memory PhotoCatalog recording every write."""

    def __init__(self, photos: Sequence[Photo] = (), settings: Optional[dict[str, str]] = None):
        self.photos = {photo.id: photo for photo in photos}
        self.settings = dict(settings or {})
        self.writes: list[tuple] = []
        self.fail_list: Optional[Exception] = None
        self.fail_settings: dict[str, Exception] = {}

    async def list_active_photos(self) -> list[Photo]:
        if self.fail_list is not None:
            raise self.fail_list
        return [photo for photo in self.photos.values() if photo.is_active]

    async def mark_inactive(self, photo_id: str) -> None:
        self.writes.append(("mark_inactive", photo_id))
        self.photos[photo_id] = self.photos[photo_id].model_copy(update={"is_active": False})

    async def record_display(self, photo_id: str, timestamp: datetime) -> None:
        self.writes.append(("record_display", photo_id, timestamp))
        photo = self.photos[photo_id]
        self.photos[photo_id] = photo.model_copy(
            update={"last_displayed": timestamp, "display_count": photo.display_count + 1}
        )

    async def get_setting(self, name: str) -> Optional[str]:
        if name in self.fail_settings:
            raise self.fail_settings[name]
        return self.settings.get(name)


def make_photo(photo_id: str, processed_path: Optional[str] = None, **kwargs) -> Photo:
    return Photo(
        id=photo_id,
        name=f"Photo {photo_id}",
        original_path=f"/photos/original/{photo_id}.jpg",
        processed_path=processed_path or f"/photos/processed/{photo_id}.png",
        **kwargs,
    )


class TickingClock:
    """Clock advancing one minute per call."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(minutes=1)
        return self.now


