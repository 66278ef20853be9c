"""Image preparation exceptions."""


class ImagingError(Exception):
    """Base exception for image preparation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFormat(ImagingError):
    """Exception raised when a source image cannot be decoded."""


class EmptyImage(ImagingError):
    """Exception raised when a source image has a zero dimension."""
