"""
Pseudo-Continuum Construction
=============================

Builds a local baseline from two continuum sidebands (blue and red) that
bracket a spectral feature.

Each sideband is reduced to a single anchor point: the mean wavelength of
its samples and their median (or mean) flux. The pseudo-continuum is the
straight line through the blue and red anchors, evaluated at every input
wavelength, or the average of the two levels when a flat baseline is
requested.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

# Minimum finite samples a sideband needs to define its level
MIN_BAND_POINTS = 1


@dataclass
class PseudoContinuum:
    """Outcome of ew_pseudo(): a baseline aligned with the input, or a failure reason."""
    success: bool
    continuum: Optional[np.ndarray] = None
    reason: Optional[str] = None
    blue_anchor: Optional[tuple] = None   # (wavelength, level)
    red_anchor: Optional[tuple] = None


def parse_continuum_window(continuum_window) -> np.ndarray:
    """
    Coerce a continuum window to a (2, 2) array of sorted [lo, hi] pairs.

    Parameters:
        continuum_window: [[blue1, blue2], [red1, red2]] or a flat sequence of four bounds

    Returns:
        float array, row 0 blue sideband, row 1 red sideband
    """
    window = np.asarray(continuum_window, dtype=float)
    if window.size != 4:
        raise ValueError(f"Continuum window needs 4 bounds [[b1, b2], [r1, r2]], got {window.size}")
    return np.sort(window.reshape(2, 2), axis=1)


def _band_anchor(wave, flux, lo, hi, use_mean):
    mask = (wave >= lo) & (wave <= hi) & np.isfinite(flux)
    if np.sum(mask) < MIN_BAND_POINTS:
        return None
    level = np.mean(flux[mask]) if use_mean else np.median(flux[mask])
    return float(np.mean(wave[mask])), float(level)


def ew_pseudo(wavelength, flux, continuum_window, flat: bool = False, mean: bool = False) -> PseudoContinuum:
    """
    Fit a pseudo-continuum through the blue and red sidebands.

    Parameters:
        wavelength: Wavelength array
        flux: Flux array (same length)
        continuum_window: [[blue1, blue2], [red1, red2]]
        flat: Use a constant baseline (average of the two sideband levels)
        mean: Use the mean instead of the median flux of each sideband

    Returns:
        PseudoContinuum with `continuum` sampled at `wavelength`, or success=False
    """
    wave = np.asarray(wavelength, dtype=float)
    flux = np.asarray(flux, dtype=float)
    window = parse_continuum_window(continuum_window)

    blue = _band_anchor(wave, flux, window[0, 0], window[0, 1], mean)
    red = _band_anchor(wave, flux, window[1, 0], window[1, 1], mean)

    if blue is None or red is None:
        missing = [name for name, anchor in (('blue', blue), ('red', red)) if anchor is None]
        return PseudoContinuum(
            success=False,
            reason=f"No usable flux in {' and '.join(missing)} continuum sideband",
            blue_anchor=blue,
            red_anchor=red,
        )

    if flat or blue[0] == red[0]:
        level = 0.5 * (blue[1] + red[1])
        continuum = np.full(len(wave), level)
    else:
        # Straight line through the blue and red anchors
        slope = (red[1] - blue[1]) / (red[0] - blue[0])
        continuum = blue[1] + slope * (wave - blue[0])

    return PseudoContinuum(success=True, continuum=continuum, blue_anchor=blue, red_anchor=red)
