import math
from typing import Sequence, Union

import numpy as np

from gray_rotate import BACKGROUND_VALUE
from gray_rotate.core.exceptions import AllocationError
from gray_rotate.core.images.buffer import PixelBuffer
from gray_rotate.core.images.geometry import RotationGeometry, compute_geometry
from gray_rotate.core.images.sampling import bilinear_sample, bilinear_sample_many
from gray_rotate.tools.logging import setup_logger
from gray_rotate.tools.timers import timer

__all__: Sequence[str] = ("ROTATION_METHODS", "rotate_image", "rotate_degrees")

logger = setup_logger()

ROTATION_METHODS: Sequence[str] = ("vectorized", "loop")
"""The available implementations of the resampling pass. Both produce identical images.
"""


def _resample_loop(source: PixelBuffer, geometry: RotationGeometry, output: PixelBuffer) -> None:
    """Fill `output` one pixel at a time through the bounds-checked buffer API."""
    for i in range(geometry.dst_width):
        for j in range(geometry.dst_height):
            x_src, y_src = geometry.map_output_to_source(float(i), float(j))

            # do nothing for pixels outside the image
            if not geometry.source_contains(x_src, y_src):
                continue

            output.set(i, j, bilinear_sample(source, x_src, y_src))


def _resample_vectorized(source: PixelBuffer, geometry: RotationGeometry, output: PixelBuffer) -> None:
    """Fill `output` by evaluating the whole canvas at once with numpy."""
    try:
        # `jj` is the row index, `ii` the column index of every output pixel
        jj, ii = np.indices(geometry.dst_shape, dtype=np.float64)
        x_src, y_src = geometry.map_output_to_source(ii, jj)
    except MemoryError as err:
        raise AllocationError(
            f"Cannot allocate the coordinate grid of a {geometry.dst_width}x{geometry.dst_height} canvas"
        ) from err

    inside = geometry.source_contains(x_src, y_src)
    output.put(inside, bilinear_sample_many(source, x_src[inside], y_src[inside]))


def rotate_image(
    source: Union[PixelBuffer, np.ndarray],
    theta: float,
    method: str = "vectorized",
    background: int = BACKGROUND_VALUE,
) -> PixelBuffer:
    """Rotate a grayscale image by `theta` radians, using bilinear interpolation.

    The output is the smallest axis-aligned canvas containing the rotated image. Output pixels
    whose inverse mapping falls outside the source are left at `background`.

    Args:
        source (Union[PixelBuffer, np.ndarray]): The image to rotate. A 2D array is copied into a
            new `PixelBuffer`.
        theta (float): The rotation angle in radians, of any sign and magnitude.
        method (str, optional): `"vectorized"` evaluates the canvas with numpy, `"loop"` visits
            every pixel in Python. Defaults to `"vectorized"`.
        background (int, optional): The intensity of unmapped pixels. Defaults to 0.

    Returns:
        PixelBuffer: The rotated image. The source is never modified.

    Raises:
        ValueError: If `method` is unknown or `background` is not a valid intensity.
        InvalidDimensionsError: If the source is empty.
        AllocationError: If the output buffer cannot be created.
    """
    if method not in ROTATION_METHODS:
        raise ValueError(f"method must be one of {ROTATION_METHODS}, got {method!r}")
    if not isinstance(source, PixelBuffer):
        source = PixelBuffer.from_array(source)

    geometry = compute_geometry(source.width, source.height, theta)
    logger.assertion(1 <= geometry.quadrant <= 4, f"quadrant must be in 1..4, got {geometry.quadrant}")
    logger.debug(
        f"Rotating {source.width}x{source.height} image by {math.degrees(geometry.theta):.2f} degrees "
        f"({geometry.theta:.4f} radians), quadrant {geometry.quadrant}, "
        f"canvas {geometry.dst_width}x{geometry.dst_height}"
    )

    output = PixelBuffer.create(geometry.dst_width, geometry.dst_height, fill=background)
    with timer(logger=logger, name=f"{method} resampling"):
        if method == "loop":
            _resample_loop(source, geometry, output)
        else:
            _resample_vectorized(source, geometry, output)

    return output


def rotate_degrees(source: Union[PixelBuffer, np.ndarray], degrees: float, **kwargs) -> PixelBuffer:
    """Same as `rotate_image`, with the angle given in degrees."""
    return rotate_image(source, math.radians(degrees), **kwargs)
