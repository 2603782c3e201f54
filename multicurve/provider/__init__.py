"""Curve containers handed to and returned by calibration."""

from .forward import MulticurveForwardProvider
from .hull_white import HullWhiteParameters, HullWhiteProvider
from .issuer import IssuerProvider
from .multicurve import MulticurveProvider
from .sensitivity import CurveBuildingBlock, SensitivityBundle

__all__ = [
    "MulticurveProvider",
    "MulticurveForwardProvider",
    "IssuerProvider",
    "HullWhiteParameters",
    "HullWhiteProvider",
    "CurveBuildingBlock",
    "SensitivityBundle",
]
