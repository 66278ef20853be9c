"""Photo catalog and settings store."""

from .database import CatalogError, SqlitePhotoCatalog
from .models import Photo, SettingKeys
from .protocol import PhotoCatalog

__all__ = ["CatalogError", "Photo", "PhotoCatalog", "SettingKeys", "SqlitePhotoCatalog"]
