"""
Interpolation methods for yield curves.

Interpolators are selected by name when a curve type is configured and
instantiated by the curve generators once node times and values are known.
"""

from .base import Interpolator
from .factory import (
    INTERPOLATORS,
    available_interpolators,
    create_interpolator,
    is_known_interpolator,
)
from .linear import LinearInterpolator, LogLinearInterpolator, PiecewiseConstantInterpolator
from .step_forward import StepForwardContinuousInterpolator

__all__ = [
    'Interpolator',
    'LinearInterpolator',
    'LogLinearInterpolator',
    'PiecewiseConstantInterpolator',
    'StepForwardContinuousInterpolator',
    'INTERPOLATORS',
    'available_interpolators',
    'create_interpolator',
    'is_known_interpolator',
]
