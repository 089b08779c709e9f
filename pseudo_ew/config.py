"""
pseudo_ew Configuration
=======================

Options for a single equivalent width measurement.

Every option of measure_ew() lives here with its default, so adding an
option never changes behaviour silently at existing call sites.

Environment Variables:
    PSEUDO_EW_QUIET: suppress informational messages ('1', 'true', 'yes', 'on')
        (only consulted when quiet is not passed explicitly)
    PSEUDO_EW_MICRONS: micron -> Angstrom conversion when not passed explicitly

Usage:
    from pseudo_ew.config import get_config
    cfg = get_config()
    print(cfg.microns_to_angstrom, cfg.quiet)
"""

import os
import math
from dataclasses import dataclass
from typing import Optional

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off')


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable, None when unset or unrecognised."""
    value = os.getenv(name, '').strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return None


@dataclass
class MeasureConfig:
    """Configuration for one measure_ew() call."""

    # Doppler shift (km/s) applied to wavelength before continuum/feature work
    rv_offset: Optional[float] = None

    # Data cleaning (zero filter runs before the finite filter)
    remove_nonfinite: bool = False
    remove_zero: bool = False

    # Diagnostics
    show_plot: bool = False
    plot_file: Optional[str] = None
    quiet: Optional[bool] = None  # None: PSEUDO_EW_QUIET, else False

    # Wavelength axis assumed in microns; width reported in Angstroms
    microns_to_angstrom: Optional[bool] = None  # None: PSEUDO_EW_MICRONS, else True

    # Pass-through selectors for ew_pseudo()
    continuum_fit_flat: bool = False
    continuum_fit_mean: bool = False

    def __post_init__(self):
        """Fill unset fields from the environment, then from the defaults."""
        if self.quiet is None:
            env_quiet = _env_flag('PSEUDO_EW_QUIET')
            self.quiet = False if env_quiet is None else env_quiet

        if self.microns_to_angstrom is None:
            env_microns = _env_flag('PSEUDO_EW_MICRONS')
            self.microns_to_angstrom = True if env_microns is None else env_microns

        self.validate()

    def validate(self):
        """Validate configuration."""
        if self.rv_offset is not None:
            try:
                rv = float(self.rv_offset)
            except (TypeError, ValueError):
                raise ValueError(f"rv_offset must be a number (km/s), got {self.rv_offset!r}")
            if not math.isfinite(rv):
                raise ValueError(f"rv_offset must be finite, got {self.rv_offset!r}")
            self.rv_offset = rv
        return True


# Global default options (lazy-loaded)
_config: Optional[MeasureConfig] = None


def get_config() -> MeasureConfig:
    """Get the global default options."""
    global _config
    if _config is None:
        _config = MeasureConfig()
    return _config


def set_config(**kwargs) -> MeasureConfig:
    """Replace the global default options with custom settings."""
    global _config
    _config = MeasureConfig(**kwargs)
    return _config
