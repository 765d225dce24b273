"""
Folded Frequency Coordinate System.

All frequency-domain math works on the *unshifted* forward transform, where
DC sits at raw index 0 and negative frequencies wrap around to the far end
of each axis.

Convention:
- Flat row-major layout: x = index % size, y = index // size
- Folding: x > size//2 -> x - size (same for y), giving signed frequencies
- angle = atan2(y, x) on folded coordinates, range (-pi, pi]
- wavelength = size / |(x, y)| in pixels; infinite at DC
- phase = atan2(im, re) + pi/2 radians; pixels = phase / 2pi * wavelength

All modules MUST use FrequencyGrid for coordinate conversions.
"""

import logging
import math
import numpy as np
from typing import Tuple

from sipattern.errors import InvalidDimensionError

logger = logging.getLogger(__name__)


class FrequencyGrid:
    """Folded frequency coordinates of a square ``size x size`` spectrum.

    Parameters
    ----------
    size : int
        Edge length of the square grid in pixels.
    """

    def __init__(self, size: int):
        if size < 1:
            raise InvalidDimensionError(f"size must be positive, got {size}")
        self.size = int(size)
        self.half = self.size // 2

        # Grid cache: avoids recomputing full (size, size) arrays
        self._cache: dict = {}

    # ------------------------------------------------------------------
    # Per-index conversions
    # ------------------------------------------------------------------

    def raw_coords(self, index: int) -> Tuple[int, int]:
        """(x, y) array position of a flat index."""
        return (index % self.size, index // self.size)

    def folded_coords(self, index: int) -> Tuple[int, int]:
        """Signed (x, y) frequency of a flat index, relative to DC."""
        x, y = self.raw_coords(index)
        if x > self.half:
            x -= self.size
        if y > self.half:
            y -= self.size
        return (x, y)

    def angle(self, index: int) -> float:
        """Direction of the frequency vector in radians."""
        x, y = self.folded_coords(index)
        return math.atan2(y, x)

    def wavelength(self, index: int) -> float:
        """Grating period in pixels. ``inf`` at DC."""
        x, y = self.folded_coords(index)
        distance = math.hypot(x, y)
        if distance == 0:
            return float('inf')
        return self.size / distance

    @staticmethod
    def phase_radians(real: float, imag: float) -> float:
        return math.atan2(imag, real) + math.pi / 2.0

    def phase_pixels(self, real: float, imag: float, index: int) -> float:
        """Phase converted to a displacement in pixels along the grating."""
        wavelength = self.wavelength(index)
        if math.isinf(wavelength):
            return 0.0
        return self.phase_radians(real, imag) / (2.0 * math.pi) * wavelength

    # ------------------------------------------------------------------
    # Grid helpers (return full (size, size) arrays)
    # ------------------------------------------------------------------

    def folded_x_grid(self) -> np.ndarray:
        """(size, size) array of signed x frequencies. Cached."""
        if 'fx' not in self._cache:
            x = np.arange(self.size)
            x = np.where(x > self.half, x - self.size, x)
            self._cache['fx'] = np.broadcast_to(x[np.newaxis, :],
                                                (self.size, self.size))
        return self._cache['fx']

    def folded_y_grid(self) -> np.ndarray:
        """(size, size) array of signed y frequencies. Cached."""
        if 'fy' not in self._cache:
            y = np.arange(self.size)
            y = np.where(y > self.half, y - self.size, y)
            self._cache['fy'] = np.broadcast_to(y[:, np.newaxis],
                                                (self.size, self.size))
        return self._cache['fy']

    def radius_grid(self) -> np.ndarray:
        """(size, size) array of folded distances from DC. Cached."""
        if 'radius' not in self._cache:
            self._cache['radius'] = np.hypot(self.folded_x_grid(),
                                             self.folded_y_grid())
        return self._cache['radius']

    def wavelength_grid(self) -> np.ndarray:
        """(size, size) array of wavelengths in pixels, ``inf`` at DC. Cached."""
        if 'wavelength' not in self._cache:
            with np.errstate(divide='ignore'):
                self._cache['wavelength'] = self.size / self.radius_grid()
        return self._cache['wavelength']

    def angle_grid(self) -> np.ndarray:
        """(size, size) array of frequency angles in radians. Cached."""
        if 'angle' not in self._cache:
            self._cache['angle'] = np.arctan2(self.folded_y_grid(),
                                              self.folded_x_grid())
        return self._cache['angle']

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialise for parameters.json."""
        return {
            "size": self.size,
            "dc_index": 0,
            "folding": "x > size//2 -> x - size",
            "wavelength_formula": "size / |(x, y)|",
            "phase_formula": "atan2(im, re) + pi/2",
        }

    def __repr__(self) -> str:
        return f"FrequencyGrid({self.size}x{self.size})"
