"""Calibration units, market quote calculators, root finders and the reference solver."""

from .bundles import MultiCurveBundle, SingleCurveBundle
from .calculators import (
    FiniteDifferenceSensitivityCalculator,
    HullWhiteParSpreadCalculator,
    IssuerParSpreadCalculator,
    ParSpreadMarketQuoteCalculator,
)
from .calibrator import CurveCalibrator
from .root_finding import ROOT_FINDERS, RootResult, broyden, get_root_finder, newton

__all__ = [
    "SingleCurveBundle",
    "MultiCurveBundle",
    "ParSpreadMarketQuoteCalculator",
    "IssuerParSpreadCalculator",
    "HullWhiteParSpreadCalculator",
    "FiniteDifferenceSensitivityCalculator",
    "CurveCalibrator",
    "RootResult",
    "ROOT_FINDERS",
    "newton",
    "broyden",
    "get_root_finder",
]
