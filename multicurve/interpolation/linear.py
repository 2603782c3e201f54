"""
Linear interpolation methods.
"""
import math

import numpy as np

from .base import Interpolator


class LinearInterpolator(Interpolator):
    """Linear interpolation on the curve values with flat extrapolation."""

    name = "LINEAR"

    def interpolate(self, t: float) -> float:
        if self._outside(t):
            return self._extrapolate_flat(t)

        i = np.searchsorted(self.pillars, t) - 1
        t1, t2 = self.pillars[i], self.pillars[i + 1]
        v1, v2 = self.values[i], self.values[i + 1]
        weight = (t - t1) / (t2 - t1)
        return float(v1 + weight * (v2 - v1))


class LogLinearInterpolator(Interpolator):
    """Linear interpolation on the logarithm of strictly positive values.

    On discount factors this gives piecewise constant forward rates.
    """

    name = "LOG_LINEAR"

    def __init__(self, pillars, values):
        super().__init__(pillars, values)
        if np.any(self.values <= 0):
            raise ValueError("Log-linear interpolation requires positive values")
        self.log_values = np.log(self.values)

    def interpolate(self, t: float) -> float:
        if self._outside(t):
            return self._extrapolate_flat(t)

        i = np.searchsorted(self.pillars, t) - 1
        t1, t2 = self.pillars[i], self.pillars[i + 1]
        weight = (t - t1) / (t2 - t1)
        log_value = self.log_values[i] + weight * (self.log_values[i + 1] - self.log_values[i])
        return math.exp(log_value)


class PiecewiseConstantInterpolator(Interpolator):
    """Piecewise constant (step function) interpolation, left-continuous."""

    name = "PIECEWISE_CONSTANT"

    def interpolate(self, t: float) -> float:
        if self._outside(t):
            return self._extrapolate_flat(t)

        i = np.searchsorted(self.pillars, t, side="left")
        return float(self.values[i])
