"""
Error taxonomy for the SI pattern engine.

All failures are local and recoverable: callers catch SIPatternError (or the
ValueError / ArithmeticError bases) and report them.  A degenerate display
range is not an error; the normaliser returns an all-zero grid instead.
"""


class SIPatternError(Exception):
    """Base class for all engine errors."""


class InvalidDimensionError(SIPatternError, ValueError):
    """Grid length does not match size*size, size < 1, or image not square."""


class UnsupportedModeError(SIPatternError, ValueError):
    """Operation needs an imaginary plane but the result is DHT-mode."""


class UndefinedFrequencyError(SIPatternError, ArithmeticError):
    """Peak search produced the DC bin (infinite wavelength) or no bin at all."""
