"""Conversion of arbitrary photos into panel-legal frame buffers.

The pipeline is pure: the same source image and geometry always produce a
byte-identical frame buffer.
"""

import logging

from PIL import Image

from ..display.geometry import PanelGeometry
from .exceptions import EmptyImage
from .palette import WHITE, nearest_level

logger = logging.getLogger(__name__)

# (dx, dy, weight) for each not-yet-visited neighbour
FLOYD_STEINBERG_WEIGHTS: tuple[tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)

def letterbox_size(source: tuple[int, int], target: tuple[int, int]) -> tuple[int, int]:
    """Largest size with the source aspect ratio that fits the target.

    Args:
        source: Source (width, height)
        target: Target (width, height)

    Returns:
        Scaled (width, height), each at least 1

    Raises:
        EmptyImage: If either source dimension is zero
    """
    src_width, src_height = source
    if src_width <= 0 or src_height <= 0:
        raise EmptyImage(f"Image has no pixels: {src_width}x{src_height}")
    width, height = target
    # Integer arithmetic keeps the limiting side exactly at the target size
    if width * src_height <= height * src_width:
        return width, max(1, src_height * width // src_width)
    return max(1, src_width * height // src_height), height


def letterbox(image: Image.Image, geometry: PanelGeometry) -> Image.Image:
    """Scale an image to fit the panel and centre it on a white canvas.

    Transparent pixels composite onto white.

    Args:
        image: Source image in any mode
        geometry: Target panel

    Returns:
        RGB image of exactly the panel size
    """
    new_width, new_height = letterbox_size(image.size, geometry.size)
    source = image.convert("RGBA")
    resized = source.resize((new_width, new_height), Image.Resampling.LANCZOS)

    canvas = Image.new("RGB", geometry.size, (WHITE, WHITE, WHITE))
    paste_x = (geometry.width - new_width) // 2
    paste_y = (geometry.height - new_height) // 2
    canvas.paste(resized, (paste_x, paste_y), resized)
    return canvas


def to_grayscale(image: Image.Image) -> Image.Image:
    """Reduce to 8-bit luminance using ITU-R 601-2 weights."""
    return image.convert("L")


def diffusion_shares(error: float) -> list[tuple[int, int, float]]:
    """Split a quantization error among the Floyd–Steinberg neighbours.

    Returns:
        List of (dx, dy, share); the shares sum to ``error``
    """
    return [(dx, dy, error * weight) for dx, dy, weight in FLOYD_STEINBERG_WEIGHTS]


def dither_to_palette(image: Image.Image) -> bytes:
    """Floyd–Steinberg dither a grayscale image to the 16-level palette.

    Error is carried in a two-row window. Shares that would land outside the
    image are dropped. Each level is chosen from the clamped value but the
    diffused error is taken from the unclamped one.

    Args:
        image: Grayscale image (converted to mode L if needed)

    Returns:
        Frame buffer, one palette value per pixel, row-major
    """
    if image.mode != "L":
        image = image.convert("L")
    width, height = image.size
    if width == 0 or height == 0:
        raise EmptyImage(f"Image has no pixels: {width}x{height}")

    pixels = image.tobytes()
    output = bytearray(width * height)

    # One padding cell each side absorbs shares that fall off the edges
    current = [0.0] * (width + 2)
    below = [0.0] * (width + 2)

    for y in range(height):
        offset = y * width
        rows = (current, below)
        for x in range(width):
            value = pixels[offset + x] + current[x + 1]
            clamped = 0.0 if value < 0.0 else 255.0 if value > 255.0 else value
            level = nearest_level(clamped)
            output[offset + x] = level

            for dx, dy, share in diffusion_shares(value - level):
                rows[dy][x + 1 + dx] += share

        current = below
        below = [0.0] * (width + 2)

    return bytes(output)


def prepare_image(image: Image.Image, geometry: PanelGeometry) -> bytes:
    """Run the full pipeline: letterbox, grayscale, dither.

    Args:
        image: Decoded source image
        geometry: Target panel

    Returns:
        Frame buffer of ``geometry.pixel_count`` palette values

    Raises:
        EmptyImage: If either source dimension is zero
    """
    logger.debug(f"Preparing {image.width}x{image.height} {image.mode} image for {geometry.width}x{geometry.height}")
    canvas = letterbox(image, geometry)
    return dither_to_palette(to_grayscale(canvas))
