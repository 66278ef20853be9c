"""Panel geometry and refresh region models."""

from dataclasses import dataclass

MAX_WIRE_DIMENSION = 0xFFFF


@dataclass(frozen=True)
class PanelGeometry:
    """Fixed pixel dimensions of a panel.

    Both the frame buffer length and every width/height field on the wire
    must match these values exactly.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        for name, value in (("width", self.width), ("height", self.height)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"Panel {name} must be an int, got {type(value).__name__}")
            if not 0 < value <= MAX_WIRE_DIMENSION:
                raise ValueError(f"Panel {name} must be in 1..{MAX_WIRE_DIMENSION}, got {value}")

    @property
    def pixel_count(self) -> int:
        """Number of pixels, which is also the frame buffer length in bytes."""
        return self.width * self.height

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def full_region(self) -> "Region":
        """Region covering the whole panel."""
        return Region(0, 0, self.width, self.height)


class Region:
    """Represents a rectangular region on the display."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        """Initialize a region.

        Args:
            x: X-coordinate of top-left corner
            y: Y-coordinate of top-left corner
            width: Width of region in pixels
            height: Height of region in pixels
        """
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def __repr__(self) -> str:
        return f"Region(x={self.x}, y={self.y}, width={self.width}, height={self.height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        return self.get_coordinates() == other.get_coordinates()

    def __hash__(self) -> int:
        return hash(self.get_coordinates())

    def get_coordinates(self) -> tuple[int, int, int, int]:
        """Get coordinates of the region.

        Returns:
            Tuple of (x, y, width, height)
        """
        return (self.x, self.y, self.width, self.height)

    def get_area(self) -> int:
        """Get area of the region in pixels."""
        return self.width * self.height

    def fits_within(self, geometry: PanelGeometry) -> bool:
        """Check the region is non-empty and lies entirely on the panel.

        Args:
            geometry: Panel the region will be refreshed on

        Returns:
            True if the region is valid for the panel, False otherwise
        """
        return (
            self.x >= 0
            and self.y >= 0
            and self.width > 0
            and self.height > 0
            and self.x + self.width <= geometry.width
            and self.y + self.height <= geometry.height
        )
