"""Image file loading for SI pattern analysis."""

from dataclasses import dataclass
from pathlib import Path
import logging
import numpy as np

from sipattern.errors import InvalidDimensionError

logger = logging.getLogger(__name__)


@dataclass
class ImageRecord:
    """Container for a loaded grayscale image."""
    values: np.ndarray  # (size*size,) float64, row-major
    size: int
    path: str


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def load_image(path: str) -> ImageRecord:
    """
    Load a square grayscale image as a flat float64 grid.

    Args:
        path: Path to an .npy array or any image format scikit-image reads

    Returns:
        ImageRecord with row-major samples and edge length

    Raises:
        InvalidDimensionError: if the image is not a square 2D array
    """
    path = Path(path)
    logger.info(f"Loading image: {path}")

    if path.suffix.lower() == '.npy':
        image = np.load(path)
    else:
        from skimage import io as skio
        image = skio.imread(str(path))

    if image.ndim == 3:
        # Drop alpha, then average colour channels to gray
        if image.shape[-1] in (2, 4):
            image = image[..., :-1]
        image = image.mean(axis=-1)

    if image.ndim != 2:
        raise InvalidDimensionError(f"expected a 2D image, got shape {image.shape}")

    h, w = image.shape
    if h != w:
        raise InvalidDimensionError(f"width and height must be equal, got {h}x{w}")
    if not _is_power_of_two(w):
        logger.warning(f"Image size {w} is not a power of 2; transforms may be slow")

    logger.info(f"Loaded {w}x{h} image, range [{image.min():.3f}, {image.max():.3f}]")
    return ImageRecord(values=image.astype(np.float64).ravel(), size=w, path=str(path))
