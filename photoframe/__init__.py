"""PhotoFrame - e-paper photo slideshow for Raspberry Pi with an IT8951 panel controller."""

__version__ = "1.0.0"
__author__ = "PhotoFrame Team"
__email__ = "support@photoframe.local"
__description__ = "E-paper photo slideshow for Raspberry Pi with 16-level grayscale IT8951 panels"

# Package metadata
__all__ = [
    "__author__",
    "__description__",
    "__email__",
    "__version__",
]
