"""Panel driver exceptions for error handling."""

from typing import Optional


class DisplayError(Exception):
    """Base exception for panel driver errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class HardwareTimeout(DisplayError):
    """Exception raised when the busy signal never clears within the bounded wait."""

    def __init__(self, message: str, timeout: Optional[float] = None):
        super().__init__(message)
        self.timeout = timeout


class InitializationFailure(DisplayError):
    """Exception raised when the panel controller fails to come up."""


class BufferSizeMismatch(DisplayError):
    """Exception raised when a frame buffer does not match the panel geometry."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Frame buffer has {actual} bytes, panel expects {expected}")
        self.expected = expected
        self.actual = actual


class DeviceStateError(DisplayError):
    """Exception raised when an operation is issued in the wrong device state."""

    def __init__(self, operation: str, state: object):
        super().__init__(f"Cannot {operation} while panel is {state}")
        self.operation = operation
        self.state = state
