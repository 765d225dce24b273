"""
Spectrum Exclusion Masks.

Boolean flat masks (True = included) for the unshifted spectrum, where the
low frequencies sit at the four wraparound corners of the array.
"""

import logging
import numpy as np
from typing import Optional

from sipattern.errors import InvalidDimensionError

logger = logging.getLogger(__name__)


def corner_distance_grid(size: int) -> np.ndarray:
    """(size, size) array of the distance from each pixel to the nearest corner.

    Corners are (0, 0), (size-1, 0), (0, size-1) and (size-1, size-1) in raw
    (col, row) coordinates.
    """
    rows, cols = np.mgrid[:size, :size]
    last = size - 1
    corners = ((0, 0), (last, 0), (0, last), (last, last))
    dist = np.full((size, size), np.inf)
    for cx, cy in corners:
        dist = np.minimum(dist, np.hypot(cols - cx, rows - cy))
    return dist


def create_mask(size: int, radius: Optional[float] = None) -> np.ndarray:
    """Build a flat exclusion mask for a size x size spectrum.

    Without ``radius`` only the DC bin (index 0) is excluded. With ``radius``
    every pixel within ``radius`` of any grid corner is excluded.
    """
    if size < 1:
        raise InvalidDimensionError(f"size must be positive, got {size}")

    if radius is None:
        mask = np.ones(size * size, dtype=bool)
        mask[0] = False
        return mask

    mask = (corner_distance_grid(size) > radius).ravel()
    logger.debug("Corner mask size=%d radius=%.2f excludes %d bins",
                 size, radius, int((~mask).sum()))
    return mask
