"""A collection of fixtures for testing the pseudo_ew package."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from pseudo_ew import config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate each test from PSEUDO_EW_* variables and the global config."""
    monkeypatch.delenv("PSEUDO_EW_QUIET", raising=False)
    monkeypatch.delenv("PSEUDO_EW_MICRONS", raising=False)
    monkeypatch.setattr(config, "_config", None)


# ================================ SPECTRA ====================================


@pytest.fixture
def line_spectrum():
    """Return a six-sample spectrum with a flat-bottomed absorption line.

    Wavelengths are in microns with 0.01 spacing; flux is 1.0 in the
    sidebands and 0.5 across the line.
    """
    wave = np.array([1.00, 1.01, 1.02, 1.03, 1.04, 1.05])
    flux = np.array([1.0, 1.0, 0.5, 0.5, 0.5, 1.0])
    return wave, flux


@pytest.fixture
def continuum_window():
    """Return sidebands holding the first and last sample of line_spectrum."""
    return [[0.995, 1.005], [1.045, 1.055]]


@pytest.fixture
def feature_window():
    """Return the feature window covering samples 1..4 of line_spectrum."""
    return [1.01, 1.04]


@pytest.fixture
def wide_spectrum():
    """Return an eleven-sample spectrum with a zero and a NaN in the line."""
    wave = np.array(
        [2.00, 2.01, 2.02, 2.03, 2.04, 2.05, 2.06, 2.07, 2.08, 2.09, 2.10]
    )
    flux = np.array(
        [1.0, 1.0, 1.0, 0.6, 0.4, 0.0, 0.4, np.nan, 1.0, 1.0, 1.0]
    )
    return wave, flux


@pytest.fixture
def wide_windows():
    """Return (continuum_window, feature_window) for wide_spectrum."""
    return [[2.00, 2.02], [2.08, 2.10]], [2.02, 2.08]
