"""SQLite photo catalog."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import aiosqlite

from .models import Photo

logger = logging.getLogger(__name__)

_PHOTO_COLUMNS = (
    "id",
    "name",
    "original_path",
    "processed_path",
    "uploaded_at",
    "last_displayed",
    "display_count",
    "is_active",
    "file_size_bytes",
    "original_width",
    "original_height",
)


class CatalogError(Exception):
    """Exception raised when a catalog operation fails."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SqlitePhotoCatalog:
    """Photo catalog stored in a SQLite database.

    Each operation opens its own connection, so an instance can be shared
    between the slideshow and command-line tools.
    """

    def __init__(self, database_path: Union[Path, str]):
        """Initialize the catalog.

        Args:
            database_path: Path to SQLite database file
        """
        self.database_path = Path(database_path)
        self._initialized = False
        self._initialization_lock: Optional[asyncio.Lock] = None

        logger.debug(f"Photo catalog configured (lazy): {self.database_path}")

    async def initialize(self) -> None:
        """Create the schema if it does not exist.

        Raises:
            CatalogError: If the database cannot be created
        """
        if self._initialized:
            return

        if self._initialization_lock is None:
            self._initialization_lock = asyncio.Lock()

        async with self._initialization_lock:
            if self._initialized:
                return
            try:
                self.database_path.parent.mkdir(parents=True, exist_ok=True)
                async with aiosqlite.connect(str(self.database_path)) as db:
                    # WAL keeps readers unblocked and reduces SD card writes
                    await db.execute("PRAGMA journal_mode=WAL")
                    await db.execute("PRAGMA synchronous=NORMAL")

                    await db.execute(
                        """
                        CREATE TABLE IF NOT EXISTS photos (
                            id TEXT PRIMARY KEY,
                            name TEXT NOT NULL,
                            original_path TEXT NOT NULL,
                            processed_path TEXT NOT NULL,
                            uploaded_at TEXT NOT NULL,
                            last_displayed TEXT,
                            display_count INTEGER NOT NULL DEFAULT 0,
                            is_active INTEGER NOT NULL DEFAULT 1,
                            file_size_bytes INTEGER NOT NULL DEFAULT 0,
                            original_width INTEGER NOT NULL DEFAULT 0,
                            original_height INTEGER NOT NULL DEFAULT 0
                        )
                    """
                    )
                    await db.execute(
                        """
                        CREATE INDEX IF NOT EXISTS idx_photos_active
                        ON photos(is_active, last_displayed)
                    """
                    )
                    await db.execute(
                        """
                        CREATE TABLE IF NOT EXISTS settings (
                            name TEXT PRIMARY KEY,
                            value TEXT NOT NULL
                        )
                    """
                    )
                    await db.commit()
            except (aiosqlite.Error, OSError) as e:
                raise CatalogError(f"Failed to initialize catalog {self.database_path}: {e}") from e

            self._initialized = True
            logger.info(f"Photo catalog initialized: {self.database_path}")

    async def add_photo(self, photo: Photo) -> Photo:
        """Insert a photo record.

        Returns:
            The stored photo
        """
        await self.initialize()
        data = photo.model_dump()
        values = [data[column] for column in _PHOTO_COLUMNS]
        placeholders = ", ".join("?" for _ in _PHOTO_COLUMNS)
        try:
            async with aiosqlite.connect(str(self.database_path)) as db:
                await db.execute(
                    f"INSERT INTO photos ({', '.join(_PHOTO_COLUMNS)}) VALUES ({placeholders})",
                    values,
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise CatalogError(f"Failed to add photo {photo.id}: {e}") from e

        logger.info(f"Added photo {photo.id} '{photo.name}'")
        return photo

    async def get_photo(self, photo_id: str) -> Optional[Photo]:
        await self.initialize()
        try:
            async with aiosqlite.connect(str(self.database_path)) as db:
                db.row_factory = aiosqlite.Row
                async with db.execute("SELECT * FROM photos WHERE id = ?", (photo_id,)) as cursor:
                    row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise CatalogError(f"Failed to read photo {photo_id}: {e}") from e
        return Photo(**dict(row)) if row is not None else None

    async def list_active_photos(self) -> list[Photo]:
        await self.initialize()
        try:
            async with aiosqlite.connect(str(self.database_path)) as db:
                db.row_factory = aiosqlite.Row
                async with db.execute(
                    "SELECT * FROM photos WHERE is_active = 1 ORDER BY uploaded_at"
                ) as cursor:
                    rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise CatalogError(f"Failed to list active photos: {e}") from e

        photos = [Photo(**dict(row)) for row in rows]
        logger.debug(f"Catalog has {len(photos)} active photos")
        return photos

    async def mark_inactive(self, photo_id: str) -> None:
        await self._update(
            "UPDATE photos SET is_active = 0 WHERE id = ?",
            (photo_id,),
            f"deactivate photo {photo_id}",
        )
        logger.info(f"Photo {photo_id} marked inactive")

    async def record_display(self, photo_id: str, timestamp: datetime) -> None:
        await self._update(
            "UPDATE photos SET last_displayed = ?, display_count = display_count + 1 WHERE id = ?",
            (timestamp.isoformat(), photo_id),
            f"record display of photo {photo_id}",
        )

    async def get_setting(self, name: str) -> Optional[str]:
        await self.initialize()
        try:
            async with aiosqlite.connect(str(self.database_path)) as db:
                async with db.execute("SELECT value FROM settings WHERE name = ?", (name,)) as cursor:
                    row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise CatalogError(f"Failed to read setting {name}: {e}") from e
        return row[0] if row is not None else None

    async def set_setting(self, name: str, value: str) -> None:
        await self.initialize()
        try:
            async with aiosqlite.connect(str(self.database_path)) as db:
                await db.execute(
                    """
                    INSERT INTO settings (name, value) VALUES (?, ?)
                    ON CONFLICT(name) DO UPDATE SET value = excluded.value
                """,
                    (name, value),
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise CatalogError(f"Failed to write setting {name}: {e}") from e
        logger.debug(f"Setting {name} = {value!r}")

    async def _update(self, sql: str, params: tuple, description: str) -> None:
        await self.initialize()
        try:
            async with aiosqlite.connect(str(self.database_path)) as db:
                cursor = await db.execute(sql, params)
                await db.commit()
                updated = cursor.rowcount
        except aiosqlite.Error as e:
            raise CatalogError(f"Failed to {description}: {e}") from e
        if updated == 0:
            logger.warning(f"Could not {description}: no such photo")
