from typing import Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from gray_rotate.core.images.buffer import PixelBuffer

plt.rcParams["savefig.bbox"] = "tight"
"""Set the bounding box for the saved figure to tightly fit the figure
"""


def _as_array(image: Union[PixelBuffer, np.ndarray]) -> np.ndarray:
    return image.to_array() if isinstance(image, PixelBuffer) else np.asarray(image)


def display_image(image: Union[PixelBuffer, np.ndarray], title: str = "Rotated Image") -> None:
    """Show a grayscale image at its native size and block until the window is closed."""
    array = _as_array(image)
    height, width = array.shape[:2]
    dpi = plt.rcParams["figure.dpi"]

    fig = plt.figure(title, figsize=(width / dpi, height / dpi))
    ax = fig.add_axes((0, 0, 1, 1))
    ax.imshow(array, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
    ax.axis("off")
    plt.show()


def display_side_by_side(
    source: Union[PixelBuffer, np.ndarray],
    rotated: Union[PixelBuffer, np.ndarray],
    figsize: Tuple[int, int] = (12, 6),
    wspace: float = 0.05,
) -> None:
    """Show the source and the rotated image next to each other and block until the window is closed.

    Args:
        source (Union[PixelBuffer, np.ndarray]): The original image.
        rotated (Union[PixelBuffer, np.ndarray]): The rotated image.
        figsize (Tuple[int, int]): The figure size (width, height) in inches.
        wspace (float): The width of the space between the two subplots.
    """
    _, (ax1, ax2) = plt.subplots(1, 2, figsize=figsize)
    plt.subplots_adjust(wspace=wspace)

    for ax, image, name in ((ax1, source, "Source"), (ax2, rotated, "Rotated")):
        ax.imshow(_as_array(image), cmap="gray", vmin=0, vmax=255)
        ax.set_title(name)
        ax.axis("off")

    plt.show()
