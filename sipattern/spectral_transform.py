"""
2D Spectral Transforms (FFT and DHT).

Unnormalised forward transforms of a flat, row-major square grid. No
fftshift is applied: DC stays at index 0 and negative frequencies wrap
around (see fft_coords).
"""

import logging
import numpy as np

from sipattern.errors import InvalidDimensionError
from sipattern.pipeline_config import SpectralResult, TransformMode

logger = logging.getLogger(__name__)


def as_grid(values, size: int) -> np.ndarray:
    """Validate a flat or (size, size) input and return a float64 (size, size) copy."""
    if size < 1:
        raise InvalidDimensionError(f"size must be positive, got {size}")
    arr = np.asarray(values, dtype=np.float64)
    if arr.size != size * size:
        raise InvalidDimensionError(
            f"grid has {arr.size} elements, expected {size}*{size}={size * size}")
    return arr.reshape(size, size).copy()


def hartley2(image: np.ndarray) -> np.ndarray:
    """Unnormalised 2D discrete Hartley transform.

    H(u, v) = sum f(x, y) * cas(2*pi*(u*x + v*y)/N), with cas = cos + sin.
    For real input this equals Re(F) - Im(F) of the forward FFT.
    """
    ft = np.fft.fft2(image)
    return ft.real - ft.imag


def transform(values, size: int, mode=TransformMode.FFT) -> SpectralResult:
    """Compute the 2D transform of a square grid.

    Parameters
    ----------
    values : array-like
        size*size samples, flat row-major or (size, size).
    size : int
        Edge length.
    mode : TransformMode or str
        FFT (complex) or DHT (real Hartley).

    Returns
    -------
    SpectralResult with flat real plane and, for FFT, flat imaginary plane.
    """
    mode = TransformMode.parse(mode)
    image = as_grid(values, size)

    if mode is TransformMode.FFT:
        ft = np.fft.fft2(image.astype(np.complex128))
        real = np.ascontiguousarray(ft.real).ravel()
        imag = np.ascontiguousarray(ft.imag).ravel()
        real.flags.writeable = False
        imag.flags.writeable = False
        logger.debug("FFT %dx%d: DC=%.4g", size, size, real[0])
        return SpectralResult(mode=mode, size=size, real=real, imag=imag)

    real = hartley2(image).ravel()
    real.flags.writeable = False
    logger.debug("DHT %dx%d: DC=%.4g", size, size, real[0])
    return SpectralResult(mode=mode, size=size, real=real, imag=None)
