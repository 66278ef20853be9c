"""The 16-level grayscale palette accepted by the panel."""

from collections.abc import Iterable

LEVELS = 16
STEP = 255 // (LEVELS - 1)

PALETTE: tuple[int, ...] = tuple(range(0, 256, STEP))
PALETTE_VALUES = frozenset(PALETTE)

BLACK = PALETTE[0]
WHITE = PALETTE[-1]


def nearest_level(value: float) -> int:
    """Return the palette value closest to ``value``.

    Equidistant values resolve to the lower level.

    Args:
        value: Intensity already clamped to [0, 255]

    Returns:
        Member of PALETTE
    """
    index = min(int(value // STEP), LEVELS - 1)
    lower = PALETTE[index]
    if index == LEVELS - 1:
        return lower
    upper = PALETTE[index + 1]
    return lower if value - lower <= upper - value else upper


def is_palette_legal(values: Iterable[int]) -> bool:
    """Check that every value of a frame buffer is a palette member."""
    return PALETTE_VALUES.issuperset(values)
