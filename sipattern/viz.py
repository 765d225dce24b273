"""Visualization utilities for SI pattern analysis outputs."""

import numpy as np
import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional
import logging

from sipattern.normalize import normalize_to_image

logger = logging.getLogger(__name__)

# Consistent figure settings
plt.rcParams['figure.dpi'] = 150
plt.rcParams['savefig.dpi'] = 150
plt.rcParams['savefig.bbox'] = 'tight'
plt.rcParams['font.size'] = 10


def save_byte_image(image: np.ndarray, path: str) -> None:
    """
    Save an 8-bit grayscale image as PNG at native resolution.

    Args:
        image: 2D uint8 array (0..255)
        path: Output path for PNG
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    plt.imsave(path, image, cmap='gray', vmin=0, vmax=255)
    logger.info(f"Saved: {path}")


def save_grid_png(values: np.ndarray, size: int, path: str,
                  mask: Optional[np.ndarray] = None,
                  logarithmic: bool = False) -> np.ndarray:
    """
    Normalise a flat grid to bytes and save it as PNG.

    Returns:
        The (size, size) uint8 image that was written
    """
    image = normalize_to_image(size, values, mask, logarithmic)
    save_byte_image(image, path)
    return image


def save_spectrum_png(values: np.ndarray, size: int, path: str,
                      mask: Optional[np.ndarray] = None,
                      logarithmic: bool = False,
                      title: str = "Spectrum",
                      peak_index: Optional[int] = None,
                      dpi: int = 150) -> None:
    """
    Save a spectrum view as a figure with colorbar and mask overlay.

    Args:
        values: Flat spectrum plane (unshifted, DC at index 0)
        size: Edge length
        path: Output path for PNG
        mask: Optional flat mask; excluded bins are drawn green
        logarithmic: Use logarithmic normalisation
        title: Figure title
        peak_index: Optional flat index to mark with a cross
        dpi: Output resolution
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    image = normalize_to_image(size, values, mask, logarithmic)

    fig, ax = plt.subplots(figsize=(8, 8))
    im = ax.imshow(image, cmap='gray', vmin=0, vmax=255, origin='upper',
                   interpolation='nearest')
    plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04,
                 label='log intensity (0-255)' if logarithmic else 'intensity (0-255)')

    if mask is not None:
        excluded = ~np.asarray(mask, dtype=bool).reshape(size, size)
        overlay = np.zeros((size, size, 4))
        overlay[excluded] = mcolors.to_rgba('#008000')
        ax.imshow(overlay, origin='upper', interpolation='nearest')

    if peak_index is not None and peak_index >= 0:
        ax.plot(peak_index % size, peak_index // size, 'r+', markersize=12)

    ax.set_title(title)
    ax.set_xlabel('u (bin)')
    ax.set_ylabel('v (bin)')

    plt.savefig(path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    logger.info(f"Saved: {path}")
