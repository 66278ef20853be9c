"""Image preparation for grayscale e-paper panels."""

from .exceptions import EmptyImage, ImagingError, UnsupportedFormat
from .palette import PALETTE, is_palette_legal, nearest_level
from .pipeline import dither_to_palette, letterbox, prepare_image, to_grayscale
from .processor import ImageProcessor

__all__ = [
    "PALETTE",
    "EmptyImage",
    "ImageProcessor",
    "ImagingError",
    "UnsupportedFormat",
    "dither_to_palette",
    "is_palette_legal",
    "letterbox",
    "nearest_level",
    "prepare_image",
    "to_grayscale",
]
