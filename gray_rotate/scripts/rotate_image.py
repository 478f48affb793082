import logging
import math
from pathlib import Path
from typing import Optional, Union

import click
from joblib import Parallel, delayed
from tqdm import tqdm

from gray_rotate import BACKGROUND_VALUE, DEFAULT_ANGLE
from gray_rotate.core.exceptions import RotationError
from gray_rotate.core.images.buffer import PixelBuffer
from gray_rotate.core.images.io import get_image_paths, load_pixel_buffer, save_image
from gray_rotate.core.images.transforms import ROTATION_METHODS, rotate_image
from gray_rotate.core.utils import is_url
from gray_rotate.tools.logging import set_log_level, setup_logger
from gray_rotate.tools.timers import timer

logger = setup_logger()


def rotate_file(
    image_path: Union[str, Path],
    output_path: Optional[Path],
    theta: float,
    method: str = "vectorized",
    background: int = BACKGROUND_VALUE,
) -> PixelBuffer:
    """Load a single image, rotate it by `theta` radians and save it to `output_path` if given."""
    source = load_pixel_buffer(image_path)
    rotated = rotate_image(source, theta, method=method, background=background)
    logger.info(f"Rotated {image_path}: {source.width}x{source.height} -> {rotated.width}x{rotated.height}")

    if output_path is not None:
        save_image(rotated, output_path)
        logger.info(f"Saved rotated image to {output_path}")

    return rotated


def rotate_folder(
    input_dir: Path,
    output_dir: Path,
    theta: float,
    method: str = "vectorized",
    background: int = BACKGROUND_VALUE,
    num_cpu: int = 4,
) -> int:
    """Rotate every image of `input_dir` and write the results with the same names to `output_dir`.

    Returns:
        int: The number of rotated images.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    image_paths = get_image_paths(input_dir)
    if not image_paths:
        logger.warning(f"No images found in {input_dir}")
        return 0

    # Each worker loads, rotates and writes its own image; buffers are never shared
    Parallel(n_jobs=num_cpu)(
        delayed(rotate_file)(image_path, output_dir / image_path.name, theta, method, background)
        for image_path in tqdm(image_paths, desc="Rotating images")
    )
    return len(image_paths)


@click.command()
@click.option(
    "-i",
    "--input-path",
    type=str,
    required=True,
    help="The image to rotate: a local file, a URL, or a folder of images",
)
@click.option(
    "-a",
    "--angle",
    type=float,
    default=DEFAULT_ANGLE,
    show_default=True,
    help="The rotation angle, in radians unless --degrees is given",
)
@click.option("-d", "--degrees", is_flag=True, help="Interpret the angle in degrees")
@click.option(
    "-o",
    "--output-path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Where to write the rotated image (or images, for a folder)",
)
@click.option(
    "-m",
    "--method",
    type=click.Choice(list(ROTATION_METHODS)),
    default="vectorized",
    show_default=True,
    help="The resampling implementation",
)
@click.option(
    "-b",
    "--background",
    type=click.IntRange(0, 255),
    default=BACKGROUND_VALUE,
    show_default=True,
    help="The intensity of pixels outside the rotated image",
)
@click.option("-s", "--show", is_flag=True, help="Display the rotated image until the window is closed")
@click.option(
    "-c",
    "--num-cpu",
    default=4,
    show_default=True,
    help="The number of CPU cores to use for a folder. Use 1 for debugging.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enables verbose mode")
def main(
    input_path: str,
    angle: float,
    degrees: bool,
    output_path: Optional[Path],
    method: str,
    background: int,
    show: bool,
    num_cpu: int,
    verbose: bool,
) -> None:
    if verbose:
        set_log_level(logging.DEBUG)

    theta = math.radians(angle) if degrees else angle
    is_folder = not is_url(input_path) and Path(input_path).is_dir()

    try:
        if is_folder:
            if output_path is None:
                raise click.UsageError("--output-path is required when --input-path is a folder")
            with timer(logger=logger, name="Batch rotation") as batch_timer:
                count = rotate_folder(Path(input_path), output_path, theta, method, background, num_cpu)
            logger.info(f"Rotated {count} images in {batch_timer.duration:.2f}s")
        else:
            rotated = rotate_file(input_path, output_path, theta, method, background)
            if show:
                # Import here so that batch runs on headless machines never load a GUI backend
                from gray_rotate.core.images.visualize import display_image

                display_image(rotated)
    except RotationError as err:
        logger.error(str(err))
        raise click.ClickException(str(err)) from err


if __name__ == "__main__":
    main()
