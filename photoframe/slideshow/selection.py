"""Photo selection policy and defensive parsing of slideshow settings."""

import logging
import random
from collections.abc import Sequence
from enum import Enum
from typing import Optional

from ..catalog.models import Photo

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_DURATION = 300
MIN_DISPLAY_DURATION = 60
DEFAULT_RANDOM_ORDER = True


class OrderingMode(str, Enum):
    RANDOM = "random"
    SEQUENTIAL = "sequential"


def parse_display_duration(
    raw: Optional[str],
    default: int = DEFAULT_DISPLAY_DURATION,
    minimum: int = MIN_DISPLAY_DURATION,
) -> int:
    """Parse the display duration setting in seconds.

    Missing or malformed values fall back to ``default``. The result is
    never below ``minimum``.

    Args:
        raw: Setting value as stored, or None when unset
        default: Duration used when the value is unusable
        minimum: Floor applied to every result

    Returns:
        Display duration in seconds
    """
    duration = default
    if raw is not None:
        try:
            duration = int(raw.strip())
        except ValueError:
            logger.warning(f"Invalid display duration {raw!r}, using {default} s")
    return max(minimum, duration)


def parse_random_order(raw: Optional[str], default: bool = DEFAULT_RANDOM_ORDER) -> bool:
    """Parse the random order flag.

    Only ``true`` and ``false`` (any case, surrounding whitespace ignored)
    are recognised; anything else yields ``default``.
    """
    if raw is None:
        return default
    value = raw.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    logger.warning(f"Invalid random order flag {raw!r}, using {default}")
    return default


def ordering_mode(random_order: bool) -> OrderingMode:
    return OrderingMode.RANDOM if random_order else OrderingMode.SEQUENTIAL


def select_next_photo(
    photos: Sequence[Photo],
    mode: OrderingMode,
    rng: Optional[random.Random] = None,
) -> Photo:
    """Choose the photo to display next.

    RANDOM picks uniformly. SEQUENTIAL picks the photo shown longest ago,
    with never-shown photos first and ties going to the lowest display count.

    Args:
        photos: Active photos, at least one
        mode: Ordering policy for this cycle
        rng: Random source for RANDOM mode

    Returns:
        The selected photo

    Raises:
        ValueError: If ``photos`` is empty
    """
    if not photos:
        raise ValueError("Cannot select from an empty photo set")

    if mode is OrderingMode.RANDOM:
        return (rng or random).choice(photos)
    return min(photos, key=lambda photo: photo.staleness_key)
