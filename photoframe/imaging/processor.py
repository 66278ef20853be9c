"""Image processor producing and reading prepared photo artifacts."""

import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from ..display.geometry import PanelGeometry
from .exceptions import UnsupportedFormat
from .pipeline import prepare_image

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".bmp", ".gif"})

PathLike = Union[str, Path]


class ImageProcessor:
    """Turns uploaded photos into prepared artifacts for one panel geometry.

    Prepared artifacts are 8-bit grayscale PNG files at exactly the panel
    resolution whose pixels are all palette values.
    """

    def __init__(self, geometry: PanelGeometry) -> None:
        self.geometry = geometry
        logger.debug(f"ImageProcessor initialized for {geometry.width}x{geometry.height}")

    @staticmethod
    def is_supported_file(path: PathLike) -> bool:
        """Check the file extension against the accepted upload formats."""
        return Path(path).suffix.lower() in ALLOWED_EXTENSIONS

    def open_image(self, path: PathLike) -> Image.Image:
        """Decode an image file fully into memory.

        Raises:
            FileNotFoundError: If the file does not exist
            UnsupportedFormat: If the file cannot be decoded
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")
        try:
            with Image.open(path) as image:
                image.load()
                return image.copy()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise UnsupportedFormat(f"Cannot decode {path}: {e}") from e

    def prepare(self, image: Image.Image) -> bytes:
        """Convert a decoded image into a frame buffer for this panel."""
        return prepare_image(image, self.geometry)

    def process_file(self, source: PathLike, destination: PathLike) -> tuple[int, int]:
        """Prepare a photo and save it as a grayscale PNG artifact.

        Args:
            source: Uploaded photo
            destination: Where to write the prepared artifact

        Returns:
            Original (width, height) of the source photo

        Raises:
            FileNotFoundError: If the source does not exist
            UnsupportedFormat: If the source cannot be decoded
            EmptyImage: If the source has a zero dimension
        """
        image = self.open_image(source)
        original_size = image.size
        buffer = self.prepare(image)

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        prepared = Image.frombytes("L", self.geometry.size, buffer)
        prepared.save(destination, "PNG")

        logger.info(
            f"Prepared {source} ({original_size[0]}x{original_size[1]}) -> {destination}"
        )
        return original_size

    def load_frame_buffer(self, path: PathLike) -> bytes:
        """Read a prepared artifact back as raw frame buffer bytes.

        The bytes are returned even if the artifact size differs from the
        panel; the driver rejects such buffers.

        Raises:
            FileNotFoundError: If the artifact does not exist
            UnsupportedFormat: If the artifact cannot be decoded
        """
        image = self.open_image(path)
        if image.mode != "L":
            image = image.convert("L")
        if image.size != self.geometry.size:
            logger.warning(
                f"Artifact {path} is {image.width}x{image.height}, "
                f"panel is {self.geometry.width}x{self.geometry.height}"
            )
        return image.tobytes()
