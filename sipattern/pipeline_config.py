"""
Data Containers and Analysis Configuration.

Value types shared by all modules (transform mode, spectral result,
SI parameters) plus the CLI configuration dataclasses and their
serialisation.
"""

import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional

import numpy as np

from sipattern.errors import UnsupportedModeError
from sipattern.fft_coords import FrequencyGrid

# Smallest grid edge the CLI accepts
MINSIZE = 4


# ======================================================================
# Core data containers
# ======================================================================

class TransformMode(Enum):
    """Kind of 2D spectral transform."""
    FFT = "fft"     # complex: real + imaginary planes
    DHT = "dht"     # Hartley: single real plane

    @classmethod
    def parse(cls, value) -> "TransformMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"unknown transform mode {value!r}, "
                             f"expected one of {[m.value for m in cls]}") from None


@dataclass(frozen=True)
class SIParameters:
    """Structured-illumination grating parameters."""
    angle: float            # radians, (-pi, pi]
    phase: float            # pixels
    wavelength: float       # pixels

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        return "angle %.4f, phase %.4f, wavelength %.4f" % (
            self.angle, self.phase, self.wavelength)


@dataclass(frozen=True, eq=False)
class SpectralResult:
    """Output of one transform call.

    ``real`` and ``imag`` are flat row-major arrays of length size*size.
    ``imag`` is None for DHT results, which therefore have no magnitude or
    phase.
    Both planes are read-only once returned by transform.
    """
    mode: TransformMode
    size: int
    real: np.ndarray
    imag: Optional[np.ndarray] = None

    VIEWS = ("dht", "abs", "re", "im", "phase")

    def _require_complex(self, what: str) -> None:
        if self.mode is not TransformMode.FFT or self.imag is None:
            raise UnsupportedModeError(
                f"{what} requires an FFT result, got {self.mode.name}")

    @property
    def magnitude(self) -> np.ndarray:
        self._require_complex("magnitude")
        return np.sqrt(self.real ** 2 + self.imag ** 2)

    @property
    def phase(self) -> np.ndarray:
        """Phase of every bin in pixels. The DC bin is reported as 0."""
        self._require_complex("phase")
        grid = FrequencyGrid(self.size)
        phase_rad = np.arctan2(self.imag, self.real) + np.pi / 2.0
        wavelength = grid.wavelength_grid().ravel()
        with np.errstate(invalid='ignore'):
            phase_px = phase_rad / (2.0 * np.pi) * wavelength
        phase_px[~np.isfinite(wavelength)] = 0.0
        return phase_px

    def view(self, name: str) -> np.ndarray:
        """Return one of the displayable planes: dht, abs, re, im, phase."""
        name = name.lower()
        if name == "dht":
            if self.mode is not TransformMode.DHT:
                raise UnsupportedModeError("dht view requires a DHT result")
            return self.real
        if name == "re":
            self._require_complex("re view")
            return self.real
        if name == "im":
            self._require_complex("im view")
            return self.imag
        if name == "abs":
            return self.magnitude
        if name == "phase":
            return self.phase
        raise ValueError(f"unknown view {name!r}, expected one of {self.VIEWS}")

    def describe(self, index: int) -> str:
        """Human-readable value of a single bin."""
        if self.mode is TransformMode.DHT:
            return "%.4f" % self.real[index]
        re, im = float(self.real[index]), float(self.imag[index])
        phase = FrequencyGrid(self.size).phase_pixels(re, im, index)
        return "%.4f%+.4fi, abs %.4f, phase %.4f" % (re, im, math.hypot(re, im), phase)


# ======================================================================
# Configuration
# ======================================================================

@dataclass
class PatternConfig:
    """Synthetic grating parameters."""
    size: int = 256
    angle: float = math.pi / 4.0    # radians
    phase: float = 0.0              # pixels
    wavelength: float = 8.0         # pixels


@dataclass
class TransformConfig:
    """Transform selection."""
    mode: str = "fft"               # "fft" | "dht"
    view: str = "abs"               # "abs" | "re" | "im" | "phase" | "dht"


@dataclass
class MaskConfig:
    """Spectrum exclusion mask."""
    enabled: bool = True            # mask overlay on the displayed spectrum
    radius: float = 0.0             # 0 = mask only the DC bin


@dataclass
class DisplayConfig:
    """Normalisation / PNG output."""
    logarithmic: bool = False
    dpi: int = 150


@dataclass
class AnalysisConfig:
    """Top-level analysis configuration."""
    pattern: PatternConfig = field(default_factory=PatternConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    mask: MaskConfig = field(default_factory=MaskConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def to_dict(self) -> dict:
        """Serialise to a JSON-safe dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "AnalysisConfig":
        """Create from a nested dict (e.g. a JSON config file)."""
        cfg = cls()
        _mapping = {
            "pattern": PatternConfig,
            "transform": TransformConfig,
            "mask": MaskConfig,
            "display": DisplayConfig,
        }
        for key, klass in _mapping.items():
            if key in d and isinstance(d[key], dict):
                sub = klass()
                for k, v in d[key].items():
                    if hasattr(sub, k):
                        setattr(sub, k, v)
                setattr(cfg, key, sub)
        return cfg
