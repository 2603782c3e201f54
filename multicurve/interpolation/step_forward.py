"""
Step forward interpolation on discount factors.
"""
import math

import numpy as np

from .base import Interpolator


class StepForwardContinuousInterpolator(Interpolator):
    """Step Forward (continuous) interpolation

    Forward rates are piecewise constant between pillar points and discount
    factors are piecewise exponential. Values must be discount factors.
    """

    name = "STEP_FORWARD_CONTINUOUS"

    def __init__(self, pillars, discount_factors):
        super().__init__(pillars, discount_factors)
        if np.any(self.values <= 0):
            raise ValueError("Step forward interpolation requires positive discount factors")
        # f_i = ln(DF_i / DF_i+1) / (t_i+1 - t_i)
        self.forward_rates = np.log(self.values[:-1] / self.values[1:]) / np.diff(self.pillars)

    def interpolate(self, t: float) -> float:
        return self.interpolate_discount_factor(t)

    def interpolate_discount_factor(self, t: float) -> float:
        if t <= 0:
            return 1.0
        if t <= self.pillars[0]:
            if self.pillars[0] <= 0:
                return float(self.values[0])
            first_zero_rate = -math.log(self.values[0]) / self.pillars[0]
            return math.exp(-first_zero_rate * t)
        if t >= self.pillars[-1]:
            if len(self.forward_rates) == 0:
                last_rate = -math.log(self.values[-1]) / self.pillars[-1]
            else:
                last_rate = self.forward_rates[-1]
            return float(self.values[-1] * math.exp(-last_rate * (t - self.pillars[-1])))

        i = np.searchsorted(self.pillars, t) - 1
        return float(self.values[i] * math.exp(-self.forward_rates[i] * (t - self.pillars[i])))
