"""Photo preparation and import modes."""

import asyncio
import logging
from typing import Any

from ...catalog.database import CatalogError, SqlitePhotoCatalog
from ...catalog.models import Photo, new_photo_id
from ...config.settings import PhotoFrameSettings
from ...imaging.exceptions import ImagingError
from ...imaging.processor import ImageProcessor

logger = logging.getLogger(__name__)


async def run_prepare_mode(args: Any, settings: PhotoFrameSettings) -> int:
    """Prepare a single photo for the configured panel.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    source, destination = args.prepare
    processor = ImageProcessor(settings.panel.geometry())
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, processor.process_file, source, destination)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except ImagingError as e:
        logger.error(f"Cannot prepare {source}: {e.message}")
        return 1
    print(f"Prepared {source} -> {destination}")
    return 0


async def run_import_mode(args: Any, settings: PhotoFrameSettings) -> int:
    """Prepare a photo into the photo root and register it in the catalog.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    source = args.import_path
    if not ImageProcessor.is_supported_file(source):
        logger.error(f"Unsupported file type: {source.suffix or source.name}")
        return 1

    photo_id = new_photo_id()
    destination = settings.processed_directory / f"{photo_id}.png"
    processor = ImageProcessor(settings.panel.geometry())
    loop = asyncio.get_running_loop()
    try:
        width, height = await loop.run_in_executor(
            None, processor.process_file, source, destination
        )
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except ImagingError as e:
        logger.error(f"Cannot import {source}: {e.message}")
        return 1

    photo = Photo(
        id=photo_id,
        name=args.name or source.stem,
        original_path=str(source.resolve()),
        processed_path="/" + destination.relative_to(settings.photo_directory).as_posix(),
        file_size_bytes=source.stat().st_size,
        original_width=width,
        original_height=height,
    )
    catalog = SqlitePhotoCatalog(settings.database_file)
    try:
        await catalog.add_photo(photo)
    except CatalogError as e:
        logger.error(e.message)
        destination.unlink(missing_ok=True)
        return 1

    print(f"Imported '{photo.name}' as {photo.id}")
    return 0
