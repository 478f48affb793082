import io
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
import requests
from PIL import Image, UnidentifiedImageError
from skimage.io import imread, imsave

from gray_rotate.core.exceptions import ImageLoadError
from gray_rotate.core.images.buffer import PixelBuffer
from gray_rotate.core.images.types import to_intensity
from gray_rotate.core.utils import is_url
from gray_rotate.tools.logging import setup_logger

logger = setup_logger()

IMAGE_EXTENSIONS: List[str] = [".bmp", ".png", ".jpg", ".jpeg", ".tif", ".tiff"]
"""The list of image file extensions handled by the batch mode.
"""


DIRECT_PIL_MODES: Tuple[str, ...] = ("1", "L", "LA", "RGB", "RGBA")
"""PIL modes whose arrays hold intensities or colors as they are. Other modes (palette, CMYK, ...)
are expanded to RGBA before conversion, the same way `imread` expands them for local files.
"""


def load_pil_image_from_url(url: str, timeout: float = 30.0) -> Image.Image:
    """Download and decode an image. Raises `requests.HTTPError` for 4xx and 5xx responses.

    Palette and other indirect modes are expanded to RGBA, so that the pixels hold colors rather
    than palette indices.
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()

    image = Image.open(io.BytesIO(response.content))
    if image.mode not in DIRECT_PIL_MODES:
        image = image.convert("RGBA")
    return image


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """Loads an image from a local path or a URL as a 2D uint8 grayscale array.

    Color images are converted to gray; see `to_intensity`.

    Raises:
        ImageLoadError: If the file does not exist, cannot be downloaded or cannot be decoded.
    """
    try:
        if isinstance(image_path, str) and is_url(image_path):
            image = np.asarray(load_pil_image_from_url(image_path))
        else:
            image = imread(image_path)
    except (OSError, ValueError, UnidentifiedImageError, requests.RequestException) as err:
        raise ImageLoadError(f"Failed to load image {image_path}: {err}") from err

    logger.info(f"Loaded image: {image_path}")
    return to_intensity(image)


def load_pixel_buffer(image_path: Union[str, Path]) -> PixelBuffer:
    """Loads an image as a `PixelBuffer`, ready to be rotated."""
    return PixelBuffer.from_array(load_image(image_path))


def save_image(image: Union[PixelBuffer, np.ndarray], path: Union[str, Path]) -> Path:
    """Write a grayscale image to `path`, creating the parent folders if needed.

    The file format is inferred from the extension of `path`.

    Returns:
        Path: The path the image was written to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    array = image.to_array() if isinstance(image, PixelBuffer) else np.asarray(image, dtype=np.uint8)
    imsave(path, array, check_contrast=False)
    logger.debug(f"Saved {array.shape[1]}x{array.shape[0]} image to {path}")
    return path


def get_image_paths(folder: Union[str, Path]) -> List[Path]:
    """Return the sorted paths of every image directly inside `folder`."""
    return sorted(p for p in Path(folder).iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)
