import numpy as np
import skimage as ski
from skimage.color import rgb2gray

from gray_rotate.core.exceptions import InvalidDimensionsError


def to_intensity(image: np.ndarray) -> np.ndarray:
    """Converts a decoded image (Grayscale, Gray + alpha, RGB, RGBA) of any dtype to a 2D uint8 array.

    Color images are converted with the luminance weights of `skimage.color.rgb2gray`; the alpha
    channel of gray + alpha and RGBA images is dropped first. Values are rescaled to `[0, 255]`
    following the usual scikit-image conventions for the input dtype, e.g. floats are expected in
    `[0, 1]`.

    Args:
        image (np.ndarray): The image to convert, of shape (H, W), (H, W, 1), (H, W, 2), (H, W, 3)
            or (H, W, 4).

    Returns:
        np.ndarray of shape (H, W) and dtype uint8.
    """
    if image.ndim == 3 and image.shape[-1] in (1, 2):
        image = image[..., 0]
    elif image.ndim == 3 and image.shape[-1] in (3, 4):
        image = rgb2gray(image[..., :3])
    elif image.ndim != 2:
        raise InvalidDimensionsError(f"Image must have shape (H, W) or (H, W, C), got {image.shape}")

    if 0 in image.shape:
        raise InvalidDimensionsError(f"Image must not be empty, got shape {image.shape}")

    # Boolean masks are treated as black and white images
    if image.dtype == bool:
        image = image.astype(np.uint8) * 255

    return ski.img_as_ubyte(image)
