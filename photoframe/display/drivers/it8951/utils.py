"""Utility functions for IT8951 panel drivers."""

import logging
import struct
import time
from collections.abc import Iterator

logger = logging.getLogger(__name__)

WORD_MAX = 0xFFFF


def delay_ms(delaytime: float) -> None:
    """Delay for specified milliseconds.

    Args:
        delaytime: Delay time in milliseconds
    """
    time.sleep(delaytime / 1000.0)


def pack_words(*words: int) -> bytes:
    """Pack 16-bit values in the controller's big-endian word order.

    The host byte order is never assumed; every multi-byte field on the
    wire goes through this function.

    Args:
        *words: Unsigned 16-bit values

    Returns:
        Packed bytes, two per word

    Raises:
        ValueError: If a value does not fit in 16 bits
    """
    for word in words:
        if not 0 <= word <= WORD_MAX:
            raise ValueError(f"Value {word} does not fit in a 16-bit wire field")
    return struct.pack(f">{len(words)}H", *words)


def unpack_words(data: bytes) -> list[int]:
    """Unpack big-endian 16-bit words.

    Args:
        data: Raw bytes read from the bus, even length

    Returns:
        List of word values
    """
    if len(data) % 2:
        raise ValueError(f"Cannot unpack {len(data)} bytes into 16-bit words")
    return list(struct.unpack(f">{len(data) // 2}H", data))


def words_to_string(words: list[int]) -> str:
    """Decode a controller version string stored as packed words."""
    raw = pack_words(*words)
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace").strip()


def iter_chunks(buffer: bytes, chunk_size: int) -> Iterator[bytes]:
    """Split a buffer into bus-sized chunks.

    Args:
        buffer: Data to split
        chunk_size: Maximum bytes per chunk

    Yields:
        Consecutive slices of the buffer, the last one possibly shorter
    """
    if chunk_size <= 0:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")
    view = memoryview(buffer)
    for offset in range(0, len(view), chunk_size):
        yield bytes(view[offset : offset + chunk_size])


def validate_buffer_size(buffer: bytes, expected_size: int) -> bool:
    """Validate buffer size.

    Args:
        buffer: Buffer to validate
        expected_size: Expected buffer size

    Returns:
        True if buffer size is valid, False otherwise
    """
    if len(buffer) != expected_size:
        logger.error(f"Invalid buffer size: {len(buffer)}, expected {expected_size}")
        return False
    return True


def vcom_to_millivolts(vcom: float) -> int:
    """Convert the VCOM printed on the panel cable (e.g. -1.53 V) to the register value.

    The controller takes the magnitude in millivolts.
    """
    millivolts = round(abs(vcom) * 1000)
    if not 0 < millivolts <= WORD_MAX:
        raise ValueError(f"VCOM {vcom} V is out of range")
    return millivolts
