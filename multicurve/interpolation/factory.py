"""
Factory functions and utilities for creating interpolators.
"""
from typing import Dict, List, Sequence, Type

from .base import Interpolator
from .linear import LinearInterpolator, LogLinearInterpolator, PiecewiseConstantInterpolator
from .step_forward import StepForwardContinuousInterpolator

INTERPOLATORS: Dict[str, Type[Interpolator]] = {
    "LINEAR": LinearInterpolator,
    "LOG_LINEAR": LogLinearInterpolator,
    "LOGLINEAR": LogLinearInterpolator,
    "PIECEWISE_CONSTANT": PiecewiseConstantInterpolator,
    "STEP_FORWARD": StepForwardContinuousInterpolator,
    "STEP_FORWARD_CONTINUOUS": StepForwardContinuousInterpolator,
}


def available_interpolators() -> List[str]:
    return sorted(INTERPOLATORS)


def is_known_interpolator(method: str) -> bool:
    return isinstance(method, str) and method.upper() in INTERPOLATORS


def create_interpolator(method: str,
                        pillars: Sequence[float],
                        values: Sequence[float]) -> Interpolator:
    """
    Create an interpolator based on method name.

    Args:
        method: Interpolation method name
        pillars: Time points
        values: Values to interpolate

    Returns:
        Configured interpolator
    """
    try:
        cls = INTERPOLATORS[method.upper()]
    except KeyError:
        raise ValueError(f"Unknown interpolation method: {method}. "
                         f"Available: {available_interpolators()}") from None
    return cls(pillars, values)
