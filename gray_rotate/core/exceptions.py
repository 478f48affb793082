from typing import Sequence

__all__: Sequence[str] = (
    "RotationError",
    "InvalidDimensionsError",
    "AllocationError",
    "OutOfBoundsAccess",
    "ImageLoadError",
)


class RotationError(Exception):
    """Base class for all errors raised by gray_rotate."""


class InvalidDimensionsError(RotationError, ValueError):
    """Raised when an image or canvas has a non-positive width or height."""


class AllocationError(RotationError, MemoryError):
    """Raised when a pixel buffer cannot be created."""


class OutOfBoundsAccess(RotationError, IndexError):
    """Raised when a pixel is read or written outside of the buffer."""

    def __init__(self, x: float, y: float, width: int, height: int) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(x, y, width, height)

    def __str__(self) -> str:
        return f"pixel ({self.x}, {self.y}) is outside of the {self.width}x{self.height} buffer"


class ImageLoadError(RotationError, OSError):
    """Raised when an image cannot be read or decoded."""
