"""
EW Tools - Core Functions for Pseudo-Continuum Equivalent Width Measurement
===========================================================================

This module measures the equivalent width (EW) of a single spectral feature
against a local pseudo-continuum anchored on two sidebands.

PIPELINE (measure_ew):
    1. clean_spectrum()          - Optionally drop non-positive / non-finite flux
    2. apply_rv_correction()     - Optionally Doppler-shift the wavelength axis
    3. ew_pseudo()               - Build the pseudo-continuum from the sidebands
    4. select_feature_region()   - Samples inside the feature window (inclusive)
    5. integrate_ew()            - Trapezoidal integral of 1 - F/F_cont
    6. Unit conversion           - microns -> Angstroms (x 1e4) by default

FAILURES:
    Measurement failures never raise. They come back as an EWMeasurement
    with ew = NaN and a status:
    - 'continuum_failed': a sideband had no usable flux, or the
      pseudo-continuum is zero / non-finite inside the feature window
    - 'insufficient_roi': MIN_ROI_POINTS or fewer samples in the feature window
    Malformed arguments (length mismatch, bad window shape) raise ValueError.

The caller's arrays are never modified.
"""

# =============================================================================
# IMPORTS
# =============================================================================
import numpy as np
from dataclasses import dataclass, field, replace
from typing import Optional
from scipy.integrate import trapezoid

from .config import MeasureConfig, get_config
from .continuum import ew_pseudo

# =============================================================================
# CONSTANTS
# =============================================================================
C_KMS = 299792.458  # Speed of light in km/s
MICRONS_TO_ANGSTROM = 1.0e4
MIN_ROI_POINTS = 3  # the feature window must hold MORE than this many samples

STATUS_OK = 'ok'
STATUS_CONTINUUM_FAILED = 'continuum_failed'
STATUS_INSUFFICIENT_ROI = 'insufficient_roi'


# =============================================================================
# RESULT TYPE
# =============================================================================

@dataclass
class EWMeasurement:
    """
    Result of measure_ew().

    `ew` is in Angstroms when the micron conversion is on, otherwise in the
    units of the wavelength axis. It is NaN whenever status is not 'ok'.
    """
    status: str
    ew: float = np.nan
    ew_raw: float = np.nan
    n_roi: int = 0
    reason: Optional[str] = None
    microns_to_angstrom: bool = True

    # Processed arrays, kept for plotting and diagnostics
    wavelength: np.ndarray = field(default=None, repr=False)
    flux: np.ndarray = field(default=None, repr=False)
    pseudo_continuum: Optional[np.ndarray] = field(default=None, repr=False)
    kept: np.ndarray = field(default=None, repr=False)
    roi_mask: np.ndarray = field(default=None, repr=False)

    @property
    def success(self) -> bool:
        return self.status == STATUS_OK

    @property
    def is_missing(self) -> bool:
        return not self.success

    def __float__(self):
        return float(self.ew)

    def as_dict(self) -> dict:
        """JSON-friendly summary (no arrays)."""
        return {
            "success": self.success,
            "status": self.status,
            "ew": None if self.is_missing else float(self.ew),
            "ew_raw": None if self.is_missing else float(self.ew_raw),
            "units": "Angstrom" if self.microns_to_angstrom else "input",
            "n_roi": int(self.n_roi),
            "n_points": 0 if self.wavelength is None else int(len(self.wavelength)),
            "reason": self.reason,
        }


# =============================================================================
# STAGES
# =============================================================================

def clean_spectrum(wavelength, flux, remove_zero: bool = False, remove_nonfinite: bool = False,
                   quiet: bool = False):
    """
    Drop unusable flux samples, keeping wavelength/flux pairs aligned.

    The zero filter runs first; the finite filter is then applied to the
    already filtered arrays. Samples are only removed, never reordered.

    Parameters:
        wavelength: Wavelength array
        flux: Flux array
        remove_zero: Keep only flux > 0
        remove_nonfinite: Keep only finite flux
        quiet: Suppress the policy message

    Returns:
        (wavelength, flux, kept) - copies, plus indices into the original arrays
    """
    wave = np.array(wavelength, dtype=float)
    flux = np.array(flux, dtype=float)
    kept = np.arange(len(flux))

    if remove_zero:
        good = flux > 0
        wave, flux, kept = wave[good], flux[good], kept[good]

    if remove_nonfinite:
        good = np.isfinite(flux)
        wave, flux, kept = wave[good], flux[good], kept[good]

    if not quiet:
        if remove_zero and remove_nonfinite:
            policy = "removing zero and non-finite flux values"
        elif remove_zero:
            policy = "removing zero flux values"
        elif remove_nonfinite:
            policy = "removing non-finite flux values"
        else:
            policy = "using all flux values"
        n_dropped = len(np.asarray(wavelength)) - len(wave)
        print(f"measure_ew: {policy} ({n_dropped} dropped, {len(wave)} kept)")

    return wave, flux, kept


def apply_rv_correction(wavelength, rv_offset: Optional[float] = None, quiet: bool = False) -> np.ndarray:
    """
    Shift wavelengths by a radial velocity: λ' = λ (1 - v/c).

    Parameters:
        wavelength: Wavelength array
        rv_offset: Velocity in km/s; None or 0 leaves the axis unchanged
        quiet: Suppress the message

    Returns:
        Corrected wavelength array (always a new array)
    """
    wave = np.array(wavelength, dtype=float)
    if not rv_offset:
        return wave

    if not quiet:
        print(f"measure_ew: applying RV correction of {rv_offset:+.2f} km/s")
    return wave * (1.0 - rv_offset / C_KMS)


def select_feature_region(wavelength, feature_window) -> np.ndarray:
    """Boolean mask of samples with f1 <= λ <= f2 (bounds may be given in either order)."""
    bounds = np.sort(np.asarray(feature_window, dtype=float).ravel())
    if bounds.size != 2:
        raise ValueError(f"Feature window needs 2 bounds [f1, f2], got {bounds.size}")
    wave = np.asarray(wavelength, dtype=float)
    return (wave >= bounds[0]) & (wave <= bounds[1])


def integrate_ew(wavelength, flux, pseudo_continuum) -> float:
    """
    Trapezoidal integral of the normalized depth 1 - F/F_cont.

    Integrates over the exact samples given (no resampling, no
    extrapolation), so the result is in the units of `wavelength`.
    """
    wave = np.asarray(wavelength, dtype=float)
    depth = 1.0 - np.asarray(flux, dtype=float) / np.asarray(pseudo_continuum, dtype=float)
    return float(trapezoid(depth, wave))


# =============================================================================
# MEASUREMENT
# =============================================================================

def measure_ew(wavelength, flux, continuum_window, feature_window,
               options: MeasureConfig = None, **overrides) -> EWMeasurement:
    """
    Measure the equivalent width of one feature against a pseudo-continuum.

    Parameters:
        wavelength: Wavelength array (microns by default)
        flux: Flux array, same length as wavelength
        continuum_window: [[blue1, blue2], [red1, red2]] sidebands
        feature_window: [f1, f2] integration range
        options: MeasureConfig (default: get_config())
        **overrides: Individual MeasureConfig fields, e.g. rv_offset=12.5

    Returns:
        EWMeasurement; ew is NaN when the measurement cannot be made
    """
    opts = options if options is not None else get_config()
    if overrides:
        opts = replace(opts, **overrides)

    if len(np.asarray(wavelength)) != len(np.asarray(flux)):
        raise ValueError(f"wavelength and flux lengths differ: "
                         f"{len(np.asarray(wavelength))} vs {len(np.asarray(flux))}")

    wave, flux_c, kept = clean_spectrum(wavelength, flux,
                                        remove_zero=opts.remove_zero,
                                        remove_nonfinite=opts.remove_nonfinite,
                                        quiet=opts.quiet)
    wave = apply_rv_correction(wave, opts.rv_offset, quiet=opts.quiet)

    pseudo = ew_pseudo(wave, flux_c, continuum_window,
                       flat=opts.continuum_fit_flat, mean=opts.continuum_fit_mean)
    roi = select_feature_region(wave, feature_window)
    n_roi = int(np.sum(roi))

    result = EWMeasurement(
        status=STATUS_OK,
        n_roi=n_roi,
        microns_to_angstrom=opts.microns_to_angstrom,
        wavelength=wave,
        flux=flux_c,
        pseudo_continuum=pseudo.continuum,
        kept=kept,
        roi_mask=roi,
    )

    if not pseudo.success:
        result.status = STATUS_CONTINUUM_FAILED
        result.reason = pseudo.reason
        return result

    if n_roi <= MIN_ROI_POINTS:
        result.status = STATUS_INSUFFICIENT_ROI
        result.reason = f"Only {n_roi} samples in feature window, need more than {MIN_ROI_POINTS}"
        return result

    cont_roi = pseudo.continuum[roi]
    if np.any(cont_roi == 0) or not np.all(np.isfinite(cont_roi)):
        result.status = STATUS_CONTINUUM_FAILED
        result.reason = "Pseudo-continuum is zero or non-finite inside the feature window"
        return result

    result.ew_raw = integrate_ew(wave[roi], flux_c[roi], cont_roi)
    result.ew = result.ew_raw * MICRONS_TO_ANGSTROM if opts.microns_to_angstrom else result.ew_raw

    if opts.show_plot:
        from .utils import plot_measurement
        plot_measurement(result, wavelength, continuum_window, feature_window,
                         output_file=opts.plot_file)
        if not opts.quiet:
            units = 'Å' if opts.microns_to_angstrom else '(input units)'
            print(f"Measured EW = {result.ew:.4f} {units} from {n_roi} samples")

    return result
