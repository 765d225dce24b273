"""
Grayscale Normalisation for Display.

Maps arbitrary real grids to 8-bit intensity, linearly or logarithmically,
with an optional mask. Masked-out elements are ignored for the range and
rendered as 0.

A degenerate range (all included values equal, or nothing included) gives
an all-zero image and a warning instead of NaN.
"""

import logging
import numpy as np
from typing import Optional

from sipattern.errors import InvalidDimensionError

logger = logging.getLogger(__name__)


def _included(values: np.ndarray, mask: Optional[np.ndarray]) -> np.ndarray:
    if mask is None:
        return np.ones(values.shape, dtype=bool)
    mask = np.asarray(mask, dtype=bool).ravel()
    if mask.size != values.size:
        raise InvalidDimensionError(
            f"mask length {mask.size} != grid length {values.size}")
    return mask


def _to_bytes(scaled: np.ndarray, included: np.ndarray) -> np.ndarray:
    out = np.zeros(scaled.shape, dtype=np.uint8)
    # truncation, like an integer cast; included values are within [0, 255]
    out[included] = np.clip(np.floor(scaled[included]), 0, 255).astype(np.uint8)
    return out


def normalize_linear(values: np.ndarray, mask: Optional[np.ndarray] = None) -> np.ndarray:
    """Linear map of [min, max] over included elements to [0, 255]."""
    values = np.asarray(values, dtype=np.float64).ravel()
    included = _included(values, mask)
    if not included.any():
        logger.warning("Normalisation: every element is masked, output is blank")
        return np.zeros(values.shape, dtype=np.uint8)

    v_min = values[included].min()
    v_max = values[included].max()
    if v_max == v_min:
        logger.warning("Normalisation: uniform input (%.4g), output is blank", v_min)
        return np.zeros(values.shape, dtype=np.uint8)

    scale = 255.0 / (v_max - v_min)
    return _to_bytes((values - v_min) * scale, included)


def normalize_log(values: np.ndarray, mask: Optional[np.ndarray] = None) -> np.ndarray:
    """Logarithmic map: g = ln(v - min + e) - 1, then g / max(g) to [0, 255]."""
    values = np.asarray(values, dtype=np.float64).ravel()
    included = _included(values, mask)
    if not included.any():
        logger.warning("Normalisation: every element is masked, output is blank")
        return np.zeros(values.shape, dtype=np.uint8)

    d_min = values[included].min()
    # excluded elements may lie below d_min; their g is never used
    with np.errstate(invalid='ignore', divide='ignore'):
        g = np.log(values - d_min + np.e) - 1.0
    g_max = g[included].max()
    if g_max == 0:
        logger.warning("Normalisation (log): uniform input (%.4g), output is blank", d_min)
        return np.zeros(values.shape, dtype=np.uint8)

    return _to_bytes(g / g_max * 255.0, included)


def normalize_to_bytes(values: np.ndarray, mask: Optional[np.ndarray] = None,
                       logarithmic: bool = False) -> np.ndarray:
    """Normalise a flat grid to uint8 (0..255)."""
    if logarithmic:
        return normalize_log(values, mask)
    return normalize_linear(values, mask)


def normalize_to_image(size: int, values: np.ndarray, mask: Optional[np.ndarray] = None,
                       logarithmic: bool = False) -> np.ndarray:
    """Normalise a flat grid and return it as a (size, size) uint8 image."""
    values = np.asarray(values, dtype=np.float64).ravel()
    if size < 1 or values.size != size * size:
        raise InvalidDimensionError(
            f"grid has {values.size} elements, expected {size}*{size}")
    return normalize_to_bytes(values, mask, logarithmic).reshape(size, size)
