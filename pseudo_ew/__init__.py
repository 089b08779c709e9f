"""pseudo_ew - Equivalent width measurement against a sideband pseudo-continuum."""

from .config import MeasureConfig, get_config, set_config
from .continuum import PseudoContinuum, ew_pseudo
from .ew_tools import (
    EWMeasurement,
    clean_spectrum,
    apply_rv_correction,
    select_feature_region,
    integrate_ew,
    measure_ew,
)

__all__ = [
    'MeasureConfig',
    'get_config',
    'set_config',
    'PseudoContinuum',
    'ew_pseudo',
    'EWMeasurement',
    'clean_spectrum',
    'apply_rv_correction',
    'select_feature_region',
    'integrate_ew',
    'measure_ew',
]
