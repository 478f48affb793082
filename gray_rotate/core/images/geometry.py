"""Geometry of the inverse mapping used to rotate an image by an arbitrary angle.

The rotated image is drawn on the smallest axis-aligned canvas that contains the rotated source
rectangle. Each canvas pixel `(i, j)` is mapped back into the source with

    x = i * cos(theta) + j * sin(theta) + offset_x
    y = -i * sin(theta) + j * cos(theta) + offset_y

The rotation matrix uses the full angle, while the translation `(offset_x, offset_y)` is a closed
form of the angle left over within the current quadrant (`theta mod pi/2`). Which corner of the
source ends up closest to the canvas origin depends on the quadrant, hence one formula per quadrant.
The four formulas agree at the quadrant boundaries, so the offset is continuous in theta.
"""
import math
from dataclasses import dataclass
from typing import Sequence, Tuple, TypeVar, Union

import numpy as np

from gray_rotate import SNAP_TOLERANCE
from gray_rotate.core.exceptions import InvalidDimensionsError

__all__: Sequence[str] = (
    "RotationGeometry",
    "compute_geometry",
    "normalize_angle",
    "get_quadrant",
    "quadrant_offset",
    "bounding_box_size",
)

T = TypeVar("T", float, np.ndarray)

TWO_PI: float = 2 * math.pi
HALF_PI: float = math.pi / 2


def _snap(value: float) -> float:
    """Snap `value` to the nearest integer if it is within `SNAP_TOLERANCE` of it."""
    nearest = round(value)
    return float(nearest) if abs(value - nearest) < SNAP_TOLERANCE else value


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(f"Image dimensions must be positive, got {width}x{height}")


def normalize_angle(theta: float) -> float:
    """Wrap `theta` (radians) into `[0, 2*pi)`. Negative angles wrap to the positive range."""
    theta = theta % TWO_PI
    # tiny negative angles round up to exactly 2*pi
    return 0.0 if theta >= TWO_PI else theta


def get_quadrant(theta: float) -> int:
    """Return the quadrant (1 to 4) of a normalized angle."""
    return min(int(theta // HALF_PI) + 1, 4)


def quadrant_offset(quadrant: int, quadrant_angle: float, src_width: int, src_height: int) -> Tuple[float, float]:
    """Translation of the inverse mapping for the given quadrant.

    Args:
        quadrant (int): The quadrant of the rotation angle, 1 to 4.
        quadrant_angle (float): The angle within the quadrant, in `[0, pi/2)`.
        src_width (int): The width of the source image.
        src_height (int): The height of the source image.

    Returns:
        Tuple[float, float]: `(offset_x, offset_y)` in source pixels.
    """
    cos, sin = math.cos(quadrant_angle), math.sin(quadrant_angle)
    if quadrant == 1:
        offset = (-cos * sin * src_height, sin * sin * src_height)
    elif quadrant == 2:
        offset = (sin * sin * src_width, src_height + cos * sin * src_width)
    elif quadrant == 3:
        offset = (src_width + cos * sin * src_height, src_height - sin * sin * src_height)
    elif quadrant == 4:
        offset = (src_width - sin * sin * src_width, -cos * sin * src_width)
    else:
        raise ValueError(f"quadrant must be one of 1, 2, 3, 4, got {quadrant}")

    return _snap(offset[0]), _snap(offset[1])


def bounding_box_size(src_width: int, src_height: int, cos_theta: float, sin_theta: float) -> Tuple[int, int]:
    """Width and height of the smallest axis-aligned box containing the rotated source."""
    width = abs(sin_theta) * src_height + abs(cos_theta) * src_width
    height = abs(cos_theta) * src_height + abs(sin_theta) * src_width
    return math.ceil(_snap(width)), math.ceil(_snap(height))


@dataclass(frozen=True)
class RotationGeometry:
    """Everything needed to map the pixels of the rotated canvas back into the source image."""

    src_width: int
    src_height: int
    theta: float
    """The rotation angle normalized to `[0, 2*pi)`.
    """
    quadrant: int
    quadrant_angle: float
    offset_x: float
    offset_y: float
    cos_theta: float
    sin_theta: float
    dst_width: int
    dst_height: int

    @property
    def dst_shape(self) -> Tuple[int, int]:
        """The `(height, width)` of the output canvas, numpy style."""
        return self.dst_height, self.dst_width

    def map_output_to_source(self, i: T, j: T) -> Tuple[T, T]:
        """Map canvas coordinates `(i, j)` (scalars or arrays) to source coordinates `(x, y)`."""
        x = i * self.cos_theta + j * self.sin_theta + self.offset_x
        y = -i * self.sin_theta + j * self.cos_theta + self.offset_y
        return x, y

    def source_contains(self, x: T, y: T) -> Union[bool, np.ndarray]:
        """True where `(x, y)` lies in the closed source rectangle `[0, width] x [0, height]`."""
        return (0 <= x) & (x <= self.src_width) & (0 <= y) & (y <= self.src_height)


def compute_geometry(src_width: int, src_height: int, theta: float) -> RotationGeometry:
    """Compute the canvas size and the inverse mapping for rotating a `src_width` x `src_height`
    image by `theta` radians.

    Args:
        src_width (int): The width of the source image.
        src_height (int): The height of the source image.
        theta (float): The rotation angle in radians, of any sign and magnitude.

    Returns:
        RotationGeometry: The geometry of the rotation.

    Raises:
        InvalidDimensionsError: If either source dimension is not positive.
    """
    _check_dimensions(src_width, src_height)

    theta = normalize_angle(theta)
    quadrant = get_quadrant(theta)
    quadrant_angle = theta % HALF_PI
    offset_x, offset_y = quadrant_offset(quadrant, quadrant_angle, src_width, src_height)

    cos_theta, sin_theta = _snap(math.cos(theta)), _snap(math.sin(theta))
    dst_width, dst_height = bounding_box_size(src_width, src_height, cos_theta, sin_theta)

    return RotationGeometry(
        src_width=src_width,
        src_height=src_height,
        theta=theta,
        quadrant=quadrant,
        quadrant_angle=quadrant_angle,
        offset_x=offset_x,
        offset_y=offset_y,
        cos_theta=cos_theta,
        sin_theta=sin_theta,
        dst_width=dst_width,
        dst_height=dst_height,
    )
