#!/usr/bin/env python3
"""
SI Pattern Analysis - Command-Line Driver

Usage:
    python analyze.py [options]
    python analyze.py --image sample.tif [options]
    python analyze.py --help

This script runs the whole analysis:
1. Synthesise an SI pattern and/or load an image
2. Select the input grid (pattern, image, or their product)
3. Transform it (FFT or DHT)
4. Estimate angle, phase and wavelength from the dominant peak
5. Write normalised PNGs and parameters.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
import numpy as np

from sipattern.errors import SIPatternError, InvalidDimensionError
from sipattern.pipeline_config import AnalysisConfig, MINSIZE, TransformMode

logger = logging.getLogger("analyze")


def build_mask(size: int, config: AnalysisConfig):
    """Peak-search mask selected by the configuration.

    DC is always excluded; a positive radius widens it to the corner discs.
    """
    from sipattern.masks import create_mask

    if config.mask.radius > 0:
        return create_mask(size, config.mask.radius)
    return create_mask(size)


def run_analysis(config: AnalysisConfig, output_dir: Path,
                 image_values: np.ndarray = None, image_size: int = None,
                 source: str = "pattern") -> dict:
    """Run synthesis, transform, estimation and output for one input.

    Parameters
    ----------
    config : AnalysisConfig
    output_dir : Path
        Directory for PNG and JSON outputs (created if missing).
    image_values, image_size : optional
        Loaded image grid; the pattern is synthesised at the image size.
    source : str
        'pattern', 'image' or 'product'.

    Returns
    -------
    dict written to parameters.json.
    """
    from sipattern.pattern import synthesize_pattern, multiply
    from sipattern.spectral_transform import transform
    from sipattern.peak_estimation import estimate, find_max_in_first_half
    from sipattern.fft_coords import FrequencyGrid
    from sipattern.viz import save_grid_png, save_spectrum_png

    pc = config.pattern
    size = image_size if image_values is not None else pc.size
    if size < MINSIZE:
        raise InvalidDimensionError(f"size must be at least {MINSIZE}, got {size}")
    if size & (size - 1):
        logger.warning("Size %d is not a power of 2", size)

    pattern = synthesize_pattern(size, pc.angle, pc.phase, pc.wavelength)
    summary = {"size": size, "source": source, "config": config.to_dict()}

    if source == "pattern":
        values = pattern
    elif image_values is None:
        raise ValueError(f"source '{source}' requires --image")
    elif source == "image":
        values = image_values
    elif source == "product":
        values, total = multiply(image_values, pattern)
        summary["product_sum"] = total
        logger.info("Product sum: %.3f", total)
    else:
        raise ValueError(f"unknown source {source!r}")

    mode = TransformMode.parse(config.transform.mode)
    mask = build_mask(size, config)
    display_mask = mask if config.mask.enabled else None
    result = transform(values, size, mode)
    fft_result = result if mode is TransformMode.FFT else transform(values, size, TransformMode.FFT)

    i_max = find_max_in_first_half(fft_result.magnitude, mask)
    params = estimate(fft_result, mask)
    summary["peak_index"] = i_max
    summary["peak_value"] = fft_result.describe(i_max)
    summary["estimate"] = params.to_dict()
    summary["frequency_grid"] = FrequencyGrid(size).to_dict()

    output_dir.mkdir(parents=True, exist_ok=True)
    save_grid_png(values, size, str(output_dir / "input.png"),
                  logarithmic=False)

    view = config.transform.view
    if mode is TransformMode.DHT and view != "dht":
        logger.warning("View '%s' is not available for DHT results, showing 'dht'", view)
        view = "dht"
    view_values = result.view(view)
    logarithmic = config.display.logarithmic
    save_grid_png(view_values, size, str(output_dir / "spectrum_view.png"),
                  mask=display_mask, logarithmic=logarithmic)
    save_spectrum_png(view_values, size, str(output_dir / "spectrum.png"),
                      mask=display_mask, logarithmic=logarithmic,
                      title=f"{mode.name} ({view})", peak_index=i_max,
                      dpi=config.display.dpi)

    resynth = synthesize_pattern(size, params.angle, params.phase, params.wavelength)
    save_grid_png(resynth, size, str(output_dir / "resynthesized.png"))

    with open(output_dir / "parameters.json", "w") as f:
        json.dump(summary, f, indent=2)

    return summary


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="SI Pattern Analysis - estimate grating parameters from the spectrum",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Synthetic pattern round trip
  python analyze.py --size 256 --angle 0.7854 --wavelength 8

  # Analyse a microscope image with a corner mask
  python analyze.py --image sample.tif --mask-radius 5 --log

  # Multiply image and pattern, show the real part of the FFT
  python analyze.py --image sample.tif --source product --view re
        """
    )

    parser.add_argument('--config', type=str,
                        help='JSON configuration file (flags override it)')
    parser.add_argument('--image', type=str,
                        help='Input image (NPY, TIFF, PNG); must be square')
    parser.add_argument('--source', type=str, choices=['pattern', 'image', 'product'],
                        help='Grid to transform (default: image if given, else pattern)')
    parser.add_argument('--size', type=int,
                        help='Pattern size in pixels (ignored with --image)')
    parser.add_argument('--angle', type=float, help='Pattern angle in radians')
    parser.add_argument('--phase', type=float, help='Pattern phase in pixels')
    parser.add_argument('--wavelength', type=float, help='Pattern wavelength in pixels')
    parser.add_argument('--mode', type=str, choices=['fft', 'dht'],
                        help='Transform mode (default: fft)')
    parser.add_argument('--view', type=str, choices=['abs', 're', 'im', 'phase', 'dht'],
                        help='Spectrum plane to display (default: abs)')
    parser.add_argument('--mask-radius', type=float, dest='mask_radius',
                        help='Exclude bins within this radius of each corner '
                             '(default: mask only the DC bin)')
    parser.add_argument('--no-mask', action='store_true',
                        help='Show the full spectrum without the mask overlay '
                             '(the peak search still excludes DC)')
    parser.add_argument('--log', action='store_true',
                        help='Logarithmic display normalisation')
    parser.add_argument('-o', '--output', type=str, default='outputs',
                        help='Output directory (default: outputs/<input_name>)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')

    if args.config:
        with open(args.config) as f:
            config = AnalysisConfig.from_dict(json.load(f))
    else:
        config = AnalysisConfig()

    for key in ('size', 'angle', 'phase', 'wavelength'):
        value = getattr(args, key)
        if value is not None:
            setattr(config.pattern, key, value)
    if args.mode:
        config.transform.mode = args.mode
        if args.mode == 'dht' and not args.view:
            config.transform.view = 'dht'
    if args.view:
        config.transform.view = args.view
    if args.mask_radius is not None:
        config.mask.radius = args.mask_radius
    if args.no_mask:
        config.mask.enabled = False
    if args.log:
        config.display.logarithmic = True

    if args.output == 'outputs':
        stem = Path(args.image).stem if args.image else 'pattern'
        output_dir = Path('outputs') / stem
    else:
        output_dir = Path(args.output)

    print("\n" + "=" * 60)
    print("SI PATTERN ANALYSIS")
    print("=" * 60)
    print(f"Output: {output_dir}/")

    try:
        image_values, image_size = None, None
        if args.image:
            from sipattern.io_image import load_image
            input_path = Path(args.image)
            if not input_path.exists():
                print(f"Error: Input file not found: {input_path}")
                return 1
            record = load_image(str(input_path))
            image_values, image_size = record.values, record.size
            print(f"Input: {input_path} ({image_size}x{image_size})")

        source = args.source or ('image' if args.image else 'pattern')
        summary = run_analysis(config, output_dir, image_values, image_size, source)
    except (SIPatternError, ValueError) as e:
        logger.error("%s", e)
        return 1

    est = summary["estimate"]
    print("\nEstimated SI parameters")
    print("-" * 60)
    print(f"  Angle:      {est['angle']:.4f} rad")
    print(f"  Phase:      {est['phase']:.4f} px")
    print(f"  Wavelength: {est['wavelength']:.4f} px")
    print(f"  Peak:       index {summary['peak_index']} ({summary['peak_value']})")
    if "product_sum" in summary:
        print(f"  Sum:        {summary['product_sum']:.3f}")

    print()
    print("Output files:")
    for f in sorted(output_dir.glob('*.png')):
        print(f"  - {f.name}")
    print("  - parameters.json")
    print("=" * 60)

    return 0


if __name__ == '__main__':
    sys.exit(main())
