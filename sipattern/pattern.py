"""
Synthetic SI Pattern Generation.

Builds reference grating grids with known angle, phase and wavelength, and
the element-wise product of a grating with a loaded image.
"""

import logging
import numpy as np
from typing import Tuple

from sipattern.errors import InvalidDimensionError

logger = logging.getLogger(__name__)


def synthesize_pattern(size: int, angle: float, phase: float,
                       wavelength: float) -> np.ndarray:
    """Generate a sinusoidal grating on a square grid.

    The sampling coordinate is rotated about the grid centre
    ``(size//2, size//2)`` rather than the sinusoid itself, so the grating
    is evaluated along a line through the centre at ``angle``.

    Parameters
    ----------
    size : int
        Edge length of the square grid.
    angle : float
        Grating direction in radians.
    phase : float
        Shift along the grating direction in pixels.
    wavelength : float
        Grating period in pixels (must be non-zero).

    Returns
    -------
    pattern : (size*size,) float64 array in [0, 1], row-major.
    """
    if size < 1:
        raise InvalidDimensionError(f"size must be positive, got {size}")
    if wavelength == 0:
        raise ValueError("wavelength must be non-zero")

    xm = ym = size // 2
    y = np.arange(size).reshape(-1, 1) - ym
    x = np.arange(size).reshape(1, -1) - xm

    r = np.sqrt(x ** 2 + y ** 2)
    x2 = xm + r * np.cos(np.arctan2(y, x) - angle)
    pattern = (1.0 + np.sin(2.0 * np.pi * (x2 + phase) / wavelength)) / 2.0

    logger.debug("Synthesised %dx%d pattern: angle=%.4f phase=%.4f wavelength=%.4f",
                 size, size, angle, phase, wavelength)
    return pattern.ravel()


def multiply(values_a: np.ndarray, values_b: np.ndarray) -> Tuple[np.ndarray, float]:
    """Element-wise product of two grids and the sum of its pixels."""
    a = np.asarray(values_a, dtype=np.float64).ravel()
    b = np.asarray(values_b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        raise InvalidDimensionError(
            f"cannot multiply grids of length {a.size} and {b.size}")
    product = a * b
    return product, float(product.sum())
