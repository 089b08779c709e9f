#!/usr/bin/env python3
"""
Pseudo-Continuum EW Measurement
===============================

Measure the equivalent width of one feature in a CSV spectrum.

The spectrum file needs 'wavelength' and 'flux' columns (override with
--wave-col / --flux-col). Wavelengths are assumed to be in microns and the
width is reported in Angstroms unless --angstrom-input is given.

Usage:
    python -m pseudo_ew.run_ew star.csv --continuum 2.10 2.11 2.14 2.15 --feature 2.12 2.13
    python -m pseudo_ew.run_ew star.csv --continuum 2.10 2.11 2.14 2.15 --feature 2.12 2.13 \\
        --rv 35.2 --remove-zero --remove-nonfinite --plot-file fit.png
"""

import sys
import json
import argparse

from .config import MeasureConfig
from .ew_tools import measure_ew
from .utils import load_spectrum


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pseudo-continuum equivalent width measurement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    pseudo-ew star.csv --continuum 2.10 2.11 2.14 2.15 --feature 2.12 2.13
    pseudo-ew star.csv --continuum 2.10 2.11 2.14 2.15 --feature 2.12 2.13 --flat --json

Environment Variables:
    PSEUDO_EW_QUIET: suppress informational messages when --quiet is not given
    PSEUDO_EW_MICRONS: micron -> Angstrom conversion unless --angstrom-input is given
        """
    )
    parser.add_argument("spectrum", type=str,
                        help="CSV spectrum file")
    parser.add_argument("--continuum", type=float, nargs=4, required=True,
                        metavar=('B1', 'B2', 'R1', 'R2'),
                        help="Blue and red continuum sideband bounds")
    parser.add_argument("--feature", type=float, nargs=2, required=True,
                        metavar=('F1', 'F2'),
                        help="Feature integration window")
    parser.add_argument("--rv", type=float, default=None,
                        help="Radial velocity offset in km/s")
    parser.add_argument("--remove-zero", action="store_true",
                        help="Drop samples with flux <= 0")
    parser.add_argument("--remove-nonfinite", action="store_true",
                        help="Drop samples with non-finite flux")
    parser.add_argument("--flat", action="store_true",
                        help="Flat pseudo-continuum")
    parser.add_argument("--mean", action="store_true",
                        help="Mean (not median) sideband level")
    parser.add_argument("--angstrom-input", action="store_true",
                        help="Wavelengths are not in microns; report width in input units")
    parser.add_argument("--plot", action="store_true",
                        help="Show a diagnostic plot")
    parser.add_argument("--plot-file", type=str, default=None,
                        help="Save the diagnostic plot to this file (implies --plot)")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress informational messages")
    parser.add_argument("--json", action="store_true",
                        help="Print the result as JSON")
    parser.add_argument("--wave-col", type=str, default='wavelength',
                        help="Wavelength column name")
    parser.add_argument("--flux-col", type=str, default='flux',
                        help="Flux column name")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    wave, flux = load_spectrum(args.spectrum, wave_col=args.wave_col, flux_col=args.flux_col)

    options = MeasureConfig(
        rv_offset=args.rv,
        remove_nonfinite=args.remove_nonfinite,
        remove_zero=args.remove_zero,
        show_plot=args.plot or args.plot_file is not None,
        plot_file=args.plot_file,
        quiet=True if args.quiet else None,
        microns_to_angstrom=False if args.angstrom_input else None,
        continuum_fit_flat=args.flat,
        continuum_fit_mean=args.mean,
    )

    continuum_window = [args.continuum[:2], args.continuum[2:]]
    result = measure_ew(wave, flux, continuum_window, args.feature, options=options)

    if args.json:
        print(json.dumps(result.as_dict(), indent=2))
    elif result.success:
        units = 'Å' if options.microns_to_angstrom else '(input units)'
        print(f"EW = {result.ew:.4f} {units}")
    else:
        print(f"EW not measured ({result.status}): {result.reason}")

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
