"""Panel driver protocol shared by the hardware and simulated drivers."""

from enum import Enum
from typing import Protocol

from ..geometry import PanelGeometry


class RefreshMode(str, Enum):
    """Controller waveform selectors.

    INIT wipes the panel to white and is used for clearing; GC16 is the
    high-quality 16-level mode used for photos. The remaining modes are
    faster, lower-fidelity waveforms exposed as an extension point.
    """

    INIT = "init"
    DU = "du"
    GC16 = "gc16"
    GL16 = "gl16"
    GLR16 = "glr16"
    GLD16 = "gld16"
    A2 = "a2"
    DU4 = "du4"


class DeviceState(str, Enum):
    """Power/lifecycle state of a panel controller."""

    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    STANDBY = "standby"
    SLEEPING = "sleeping"


class PanelDriver(Protocol):
    """Protocol for e-paper panel drivers.

    Every operation except ``initialize`` and the shutdown helpers requires
    the driver to be RUNNING. Failures are raised as
    :class:`~photoframe.display.exceptions.DisplayError` subclasses.
    """

    geometry: PanelGeometry

    @property
    def state(self) -> DeviceState:
        """Current lifecycle state."""
        ...

    def initialize(self) -> None:
        """Reset the controller and bring it to RUNNING."""
        ...

    def load_frame(self, buffer: bytes) -> None:
        """Transfer a full-panel frame buffer into controller memory.

        Args:
            buffer: One byte per pixel, row-major, ``width * height`` long
        """
        ...

    def refresh_area(self, x: int, y: int, width: int, height: int, mode: RefreshMode) -> None:
        """Refresh a rectangle of the panel from controller memory."""
        ...

    def refresh_full(self, mode: RefreshMode = RefreshMode.GC16) -> None:
        """Refresh the whole panel."""
        ...

    def clear(self) -> None:
        """Wipe the panel to white."""
        ...

    def enter_sleep(self) -> None:
        """Put the controller to sleep. No-op unless RUNNING."""
        ...

    def shutdown(self) -> None:
        """Sleep best-effort and release all hardware handles."""
        ...
