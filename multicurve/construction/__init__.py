"""Curve set-up, calibration plan and stage-by-stage execution."""

from .builder import BuildResult, CurveBuilder
from .descriptor import CurveTypeDescriptor, PreConstructedCurveEntry
from .flavors import (
    CurveFlavor,
    DiscountingFlavor,
    ForwardDirectFlavor,
    HullWhiteFlavor,
    IssuerFlavor,
)
from .forms import (
    ContinuousDiscountFactor,
    ContinuousYield,
    CurveForm,
    Functional,
    NodeTimePolicy,
    PeriodicYield,
)
from .node_order import NodeOrderCalculator
from .settings import RootFinderSettings
from .setup import CurveSetUpBuilder

__all__ = [
    # Set-up
    "CurveSetUpBuilder",
    "CurveTypeDescriptor",
    "PreConstructedCurveEntry",
    "RootFinderSettings",
    # Forms
    "CurveForm",
    "ContinuousYield",
    "PeriodicYield",
    "ContinuousDiscountFactor",
    "Functional",
    "NodeTimePolicy",
    # Flavors
    "CurveFlavor",
    "DiscountingFlavor",
    "ForwardDirectFlavor",
    "IssuerFlavor",
    "HullWhiteFlavor",
    # Execution
    "NodeOrderCalculator",
    "CurveBuilder",
    "BuildResult",
]
