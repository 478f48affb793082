from typing import Tuple

import numpy as np

from gray_rotate import BACKGROUND_VALUE
from gray_rotate.core.exceptions import AllocationError, InvalidDimensionsError, OutOfBoundsAccess

INTENSITY_MIN: int = 0
INTENSITY_MAX: int = 255


class PixelBuffer:
    """A single channel, 8-bit raster with explicit width and height.

    Samples are addressed as `(x, y)` with `0 <= x < width` and `0 <= y < height`. Internally they
    are stored in a numpy array of shape `(height, width)`, i.e. indexed as `[y, x]`. Every access
    through `get` and `set` is bounds checked; negative coordinates are never wrapped around the
    way numpy indexing would.
    """

    __slots__ = ("_samples",)

    def __init__(self, samples: np.ndarray) -> None:
        if samples.ndim != 2 or samples.dtype != np.uint8:
            raise InvalidDimensionsError(f"Expected a 2D uint8 array, got {samples.ndim}D {samples.dtype}")
        if 0 in samples.shape:
            raise InvalidDimensionsError(f"Image must not be empty, got shape {samples.shape}")
        self._samples = samples

    @classmethod
    def create(cls, width: int, height: int, fill: int = BACKGROUND_VALUE) -> "PixelBuffer":
        """Allocate a `width` x `height` buffer with every sample set to `fill`.

        Raises:
            AllocationError: If either dimension is not a positive integer, or the memory for the
                buffer cannot be allocated.
        """
        if not all(isinstance(dim, (int, np.integer)) and dim > 0 for dim in (width, height)):
            raise AllocationError(f"Cannot allocate a {width}x{height} buffer")
        _check_intensity(fill)

        try:
            samples = np.full((int(height), int(width)), fill, dtype=np.uint8)
        except (MemoryError, ValueError) as err:
            raise AllocationError(f"Cannot allocate a {width}x{height} buffer: {err}") from err
        return cls(samples)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Copy a 2D array of intensities into a new buffer.

        Only integer arrays with values in `[0, 255]` are accepted; convert images with other
        dtypes or ranges with `gray_rotate.core.images.types.to_intensity` first.

        Raises:
            InvalidDimensionsError: If the array is not 2D or is empty.
            ValueError: If the array is not of an integer dtype or holds values outside `[0, 255]`.
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise InvalidDimensionsError(f"Image must have shape (H, W), got {array.shape}")
        if array.size == 0:
            raise InvalidDimensionsError(f"Image must not be empty, got shape {array.shape}")
        if not np.issubdtype(array.dtype, np.integer):
            raise ValueError(f"Expected an integer array, got {array.dtype}; convert it with `to_intensity`")

        low, high = int(array.min()), int(array.max())
        if low < INTENSITY_MIN or high > INTENSITY_MAX:
            raise ValueError(f"Intensities must be in [{INTENSITY_MIN}, {INTENSITY_MAX}], got [{low}, {high}]")
        return cls(array.astype(np.uint8, copy=True))

    @property
    def width(self) -> int:
        return self._samples.shape[1]

    @property
    def height(self) -> int:
        return self._samples.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        """The `(height, width)` of the buffer, numpy style."""
        return self.height, self.width

    @property
    def samples(self) -> np.ndarray:
        """Read-only view of the samples, indexed `[y, x]`."""
        view = self._samples.view()
        view.flags.writeable = False
        return view

    def contains(self, x: int, y: int) -> bool:
        """Return True if `(x, y)` addresses a pixel of the buffer."""
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            raise OutOfBoundsAccess(x, y, self.width, self.height)
        return int(self._samples[y, x])

    def set(self, x: int, y: int, value: int) -> None:
        if not self.contains(x, y):
            raise OutOfBoundsAccess(x, y, self.width, self.height)
        _check_intensity(value)
        self._samples[y, x] = value

    def put(self, mask: np.ndarray, values: np.ndarray) -> None:
        """Write `values` into the pixels selected by the boolean `mask` of shape `(height, width)`."""
        if mask.shape != self.shape:
            raise ValueError(f"mask must have shape {self.shape}, got {mask.shape}")
        self._samples[mask] = values

    def to_array(self) -> np.ndarray:
        """Return a writable copy of the samples, indexed `[y, x]`."""
        return self._samples.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self._samples, other._samples)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(width={self.width}, height={self.height})"


def _check_intensity(value: int) -> None:
    if not INTENSITY_MIN <= value <= INTENSITY_MAX:
        raise ValueError(f"Intensity must be in [{INTENSITY_MIN}, {INTENSITY_MAX}], got {value}")
