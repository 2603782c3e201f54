"""Curves and the generators that build them from parameters."""

from .base import BaseCurve, Curve
from .functional import NelsonSiegelCurve
from .generators import (
    CurveGenerator,
    DiscountFactorGenerator,
    InterpolatedCurveGenerator,
    NelsonSiegelGenerator,
    PeriodicYieldGenerator,
    SpreadGenerator,
    YieldGenerator,
)
from .interpolated import DiscountFactorCurve, PeriodicYieldCurve, YieldCurve
from .spread import SpreadCurve

__all__ = [
    # Curves
    "Curve",
    "BaseCurve",
    "YieldCurve",
    "PeriodicYieldCurve",
    "DiscountFactorCurve",
    "NelsonSiegelCurve",
    "SpreadCurve",
    # Generators
    "CurveGenerator",
    "InterpolatedCurveGenerator",
    "YieldGenerator",
    "PeriodicYieldGenerator",
    "DiscountFactorGenerator",
    "NelsonSiegelGenerator",
    "SpreadGenerator",
]
