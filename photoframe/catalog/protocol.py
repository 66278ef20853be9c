"""Interface the slideshow consumes from the photo catalog."""

from collections.abc import Sequence
from datetime import datetime
from typing import Optional, Protocol

from .models import Photo


class PhotoCatalog(Protocol):
    """Store of photo records and key-value settings.

    All methods may perform blocking I/O and are awaited by the slideshow
    outside of any panel operation.
    """

    async def list_active_photos(self) -> Sequence[Photo]:
        """Return every photo whose record is active."""
        ...

    async def mark_inactive(self, photo_id: str) -> None:
        """Deactivate a photo so it is no longer selected."""
        ...

    async def record_display(self, photo_id: str, timestamp: datetime) -> None:
        """Set ``last_displayed`` and increment ``display_count``."""
        ...

    async def get_setting(self, name: str) -> Optional[str]:
        """Return the raw setting value, or None when unset."""
        ...
