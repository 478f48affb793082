import math
from typing import Sequence, Union

import numpy as np

from gray_rotate.core.exceptions import OutOfBoundsAccess
from gray_rotate.core.images.buffer import INTENSITY_MAX, INTENSITY_MIN, PixelBuffer

__all__: Sequence[str] = ("bilinear_sample", "bilinear_sample_many")


def _narrow(value: Union[float, np.ndarray]) -> Union[int, np.ndarray]:
    """Round interpolated intensities to the nearest 8-bit value."""
    narrowed = np.clip(np.rint(value), INTENSITY_MIN, INTENSITY_MAX)
    return narrowed.astype(np.uint8) if isinstance(narrowed, np.ndarray) else int(narrowed)


def bilinear_sample(buffer: PixelBuffer, x: float, y: float) -> int:
    """Reconstruct the intensity at the fractional coordinate `(x, y)` by bilinear interpolation.

    The four neighbours are the pixels at `floor` and `ceil` of each coordinate. The value is first
    interpolated along x for the top and bottom rows, then along y between those two rows. When a
    coordinate is integral both neighbours coincide and the read is exact.

    Coordinates are accepted in the closed range `[0, width] x [0, height]`. The upper neighbours are
    clamped to the last column / row, so a coordinate in `(width - 1, width]` takes the value of the
    edge pixel instead of reading past it.

    Args:
        buffer (PixelBuffer): The image to sample.
        x (float): The horizontal coordinate.
        y (float): The vertical coordinate.

    Returns:
        int: The interpolated intensity, rounded to the nearest integer.

    Raises:
        OutOfBoundsAccess: If `(x, y)` lies outside `[0, width] x [0, height]`.
    """
    if not (0 <= x <= buffer.width and 0 <= y <= buffer.height):
        raise OutOfBoundsAccess(x, y, buffer.width, buffer.height)

    # get neighbour coordinates
    x1, y1 = math.floor(x), math.floor(y)
    x2, y2 = math.ceil(x), math.ceil(y)
    dx, dy = x - x1, y - y1

    x1, x2 = min(x1, buffer.width - 1), min(x2, buffer.width - 1)
    y1, y2 = min(y1, buffer.height - 1), min(y2, buffer.height - 1)

    # interpolate along x for the top and bottom rows, then along y
    row_top = buffer.get(x1, y1) * (1 - dx) + buffer.get(x2, y1) * dx
    row_bottom = buffer.get(x1, y2) * (1 - dx) + buffer.get(x2, y2) * dx
    return _narrow(row_top * (1 - dy) + row_bottom * dy)


def bilinear_sample_many(buffer: PixelBuffer, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Vectorized `bilinear_sample` over arrays of coordinates of the same shape.

    Every element is computed exactly as `bilinear_sample` would compute it.

    Returns:
        np.ndarray: uint8 intensities with the shape of `xs`.

    Raises:
        OutOfBoundsAccess: If any coordinate lies outside `[0, width] x [0, height]`.
    """
    xs, ys = np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64)
    if xs.shape != ys.shape:
        raise ValueError(f"xs and ys must have the same shape, got {xs.shape} and {ys.shape}")

    outside = (xs < 0) | (ys < 0) | (xs > buffer.width) | (ys > buffer.height)
    if outside.any():
        idx = np.argwhere(outside)[0]
        raise OutOfBoundsAccess(float(xs[tuple(idx)]), float(ys[tuple(idx)]), buffer.width, buffer.height)

    x1, y1 = np.floor(xs), np.floor(ys)
    dx, dy = xs - x1, ys - y1

    last_col, last_row = buffer.width - 1, buffer.height - 1
    x2 = np.minimum(np.ceil(xs), last_col).astype(np.intp)
    y2 = np.minimum(np.ceil(ys), last_row).astype(np.intp)
    x1 = np.minimum(x1, last_col).astype(np.intp)
    y1 = np.minimum(y1, last_row).astype(np.intp)

    samples = buffer.samples.astype(np.float64)
    row_top = samples[y1, x1] * (1 - dx) + samples[y1, x2] * dx
    row_bottom = samples[y2, x1] * (1 - dx) + samples[y2, x2] * dx
    return _narrow(row_top * (1 - dy) + row_bottom * dy)
