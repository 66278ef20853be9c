"""Catalog models for photos and settings."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

# Sort key for photos that have never been displayed
NEVER_DISPLAYED = datetime.min.replace(tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_photo_id() -> str:
    return uuid.uuid4().hex


class SettingKeys:
    """Names of the mutable settings re-read every slideshow cycle."""

    DISPLAY_DURATION_SECONDS = "DisplayDurationSeconds"
    ENABLE_RANDOM_ORDER = "EnableRandomOrder"


class Photo(BaseModel):
    """A photo record in the catalog."""

    id: str = Field(default_factory=new_photo_id)
    name: str
    original_path: str
    # Prepared artifact path, relative to the photo root (e.g. /photos/processed/x.png)
    processed_path: str
    uploaded_at: datetime = Field(default_factory=utc_now)
    last_displayed: Optional[datetime] = None
    display_count: int = 0
    is_active: bool = True
    file_size_bytes: int = 0
    original_width: int = 0
    original_height: int = 0

    @field_serializer("uploaded_at", "last_displayed")
    def serialize_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat() if dt is not None else None

    @property
    def staleness_key(self) -> tuple[datetime, int]:
        """Sort key for fair ordering: oldest display first, then fewest displays."""
        last = self.last_displayed or NEVER_DISPLAYED
        if last.tzinfo is None:
            last = last.replace(tzinfo=timezone.utc)
        return (last, self.display_count)

    @property
    def has_been_displayed(self) -> bool:
        return self.last_displayed is not None
