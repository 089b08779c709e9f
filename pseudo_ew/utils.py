"""
Utility Functions for EW Analysis
==================================

Spectrum loading and plotting helpers.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional, Tuple

from .continuum import parse_continuum_window


# =============================================================================
# SPECTRUM LOADING
# =============================================================================

def load_spectrum(path, wave_col: str = 'wavelength', flux_col: str = 'flux') -> Tuple[np.ndarray, np.ndarray]:
    """
    Load a spectrum from a CSV file.

    Args:
        path: CSV file with at least a wavelength and a flux column
        wave_col: Name of the wavelength column
        flux_col: Name of the flux column

    Returns:
        (wavelength, flux) as float arrays, in file order
    """
    spec_file = Path(path)
    if not spec_file.exists():
        raise FileNotFoundError(f"Spectrum not found: {spec_file}")

    spec = pd.read_csv(spec_file)
    missing = [col for col in (wave_col, flux_col) if col not in spec.columns]
    if missing:
        raise KeyError(f"Columns {missing} not in {spec_file.name}; available: {list(spec.columns)}")

    return spec[wave_col].to_numpy(dtype=float), spec[flux_col].to_numpy(dtype=float)


# =============================================================================
# MEASUREMENT PLOTTING
# =============================================================================

def plot_measurement(measurement, original_wavelength, continuum_window, feature_window,
                     output_file: str = None) -> Optional[str]:
    """
    Diagnostic plot of a measure_ew() result.

    Shows the cleaned (and RV-corrected) spectrum with the feature window
    bounds (blue dashed) and the four continuum bounds (grey dotted). The
    pseudo-continuum is drawn against the original, uncorrected wavelengths
    of the retained samples.

    Args:
        measurement: EWMeasurement from measure_ew()
        original_wavelength: Wavelength array as passed to measure_ew()
        continuum_window: [[blue1, blue2], [red1, red2]]
        feature_window: [f1, f2]
        output_file: Save here instead of calling plt.show()

    Returns:
        Path of the saved figure, or None when shown interactively
    """
    wave = measurement.wavelength
    flux = measurement.flux
    window = parse_continuum_window(continuum_window)
    f1, f2 = np.asarray(feature_window, dtype=float).ravel()

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(wave, flux, 'k-', lw=0.8, label='Spectrum')

    if measurement.pseudo_continuum is not None:
        orig_wave = np.asarray(original_wavelength, dtype=float)[measurement.kept]
        ax.plot(orig_wave, measurement.pseudo_continuum, 'r-', lw=1.5, label='Pseudo-continuum')

    ax.axvline(f1, color='blue', ls='--', alpha=0.7, label='Feature window')
    ax.axvline(f2, color='blue', ls='--', alpha=0.7)
    for bound in window.ravel():
        ax.axvline(bound, color='gray', ls=':', alpha=0.7)

    units = 'Å' if measurement.microns_to_angstrom else '(input units)'
    if measurement.success:
        ax.set_title(f'EW = {measurement.ew:.3f} {units} | {measurement.n_roi} samples')
    else:
        ax.set_title(f'EW not measured: {measurement.reason}')

    ax.set_xlabel('Wavelength (μm)' if measurement.microns_to_angstrom else 'Wavelength')
    ax.set_ylabel('Flux')
    ax.legend(loc='lower right', fontsize=9)
    fig.tight_layout()

    if output_file:
        fig.savefig(output_file, dpi=150, bbox_inches='tight')
        plt.close(fig)
        return str(output_file)

    plt.show()
    plt.close(fig)
    return None
