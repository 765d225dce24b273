"""
Synthetic Data Generators for SI Pattern Tests.

Provides known-ground-truth gratings and spectra for unit and integration
tests.
"""

import numpy as np
from typing import Tuple

from sipattern.pattern import synthesize_pattern
from sipattern.pipeline_config import SpectralResult, TransformMode
from sipattern.spectral_transform import transform


def generate_noisy_grating(
    size: int = 64,
    angle: float = 0.0,
    phase: float = 0.0,
    wavelength: float = 8.0,
    noise_level: float = 0.05,
    background: float = 100.0,
    amplitude: float = 50.0,
) -> np.ndarray:
    """Grating scaled to camera-like intensities with additive Gaussian noise.

    Parameters
    ----------
    size : edge length in pixels
    angle, phase, wavelength : SI parameters (radians, pixels, pixels)
    noise_level : noise std relative to amplitude
    background : constant offset (bright field)
    amplitude : peak-to-peak grating contrast

    Returns
    -------
    values : (size*size,) float64 array, row-major
    """
    pattern = synthesize_pattern(size, angle, phase, wavelength)
    values = background + amplitude * pattern
    if noise_level > 0:
        values = values + np.random.default_rng(42).normal(
            0, noise_level * amplitude, values.shape)
    return values


def generate_grating_spectrum(
    size: int = 32,
    angle: float = 0.0,
    phase: float = 0.0,
    wavelength: float = 8.0,
) -> Tuple[np.ndarray, SpectralResult]:
    """Noise-free grating and its FFT result."""
    pattern = synthesize_pattern(size, angle, phase, wavelength)
    return pattern, transform(pattern, size, TransformMode.FFT)
