"""
SI Parameter Estimation from the Dominant Spectral Peak.

Single-peak heuristic: the strongest non-excluded bin of the FFT magnitude
gives the grating direction and period, its phase gives the shift.

Scan policy: only the first half of the row-major layout is searched
(PEAK_SCAN_FRACTION), combined with a mask that removes DC and its
wraparound neighbours (see masks.create_mask).
"""

import logging
import numpy as np
from typing import Optional

from sipattern.errors import (
    InvalidDimensionError, UndefinedFrequencyError, UnsupportedModeError,
)
from sipattern.fft_coords import FrequencyGrid
from sipattern.pipeline_config import SIParameters, SpectralResult, TransformMode

logger = logging.getLogger(__name__)

# Fraction of the flat array (from index 0) searched for the peak. The
# remaining half holds the Hermitian mirror of the searched rows.
PEAK_SCAN_FRACTION = 0.5


def find_max_in_first_half(values: np.ndarray,
                           mask: Optional[np.ndarray] = None) -> int:
    """Index of the largest value among the first half of ``values``.

    Ties resolve to the lowest index. Indices whose mask entry is False are
    skipped. Returns -1 if no index is eligible.
    """
    values = np.asarray(values, dtype=np.float64).ravel()
    stop = int(values.size * PEAK_SCAN_FRACTION)
    candidates = values[:stop]

    if mask is not None:
        mask = np.asarray(mask, dtype=bool).ravel()
        if mask.size != values.size:
            raise InvalidDimensionError(
                f"mask length {mask.size} != values length {values.size}")
        eligible = mask[:stop]
        if not eligible.any():
            return -1
        candidates = np.where(eligible, candidates, -np.inf)
    elif stop == 0:
        return -1

    # NaN never wins a strict '>' comparison
    candidates = np.where(np.isnan(candidates), -np.inf, candidates)
    # argmax returns the first occurrence, matching a strict '>' scan
    i_max = int(np.argmax(candidates))
    if candidates[i_max] == -np.inf:
        return -1
    return i_max


def si_params_at(result: SpectralResult, index: int) -> SIParameters:
    """SI parameters encoded by a single FFT bin."""
    if result.mode is not TransformMode.FFT or result.imag is None:
        raise UnsupportedModeError(
            f"SI parameters need an FFT result, got {result.mode.name}")
    grid = FrequencyGrid(result.size)
    wavelength = grid.wavelength(index)
    if np.isinf(wavelength):
        raise UndefinedFrequencyError(
            f"bin {index} is the DC bin; wavelength is undefined")

    re = float(result.real[index])
    im = float(result.imag[index])
    return SIParameters(
        angle=grid.angle(index),
        phase=grid.phase_pixels(re, im, index),
        wavelength=wavelength,
    )


def estimate(result: SpectralResult,
             mask: Optional[np.ndarray] = None) -> SIParameters:
    """Estimate SI parameters from the dominant peak of an FFT result.

    Parameters
    ----------
    result : SpectralResult
        Must be FFT-mode.
    mask : np.ndarray, optional
        Flat boolean mask; False entries are never chosen.

    Returns
    -------
    SIParameters
    """
    if result.mode is not TransformMode.FFT or result.imag is None:
        raise UnsupportedModeError(
            f"estimate requires an FFT result, got {result.mode.name}")

    i_max = find_max_in_first_half(result.magnitude, mask)
    if i_max < 0:
        raise UndefinedFrequencyError("no unmasked bin available for peak search")

    grid = FrequencyGrid(result.size)
    if grid.folded_coords(i_max) == (0, 0):
        logger.warning("Peak search selected the DC bin; mask does not exclude it")
        raise UndefinedFrequencyError("dominant peak is the DC bin")

    params = si_params_at(result, i_max)
    logger.info("Peak at index %d %s: %s", i_max, grid.folded_coords(i_max), params)
    return params
