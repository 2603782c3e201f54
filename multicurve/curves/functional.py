"""
Parametric curves.
"""

import math
from typing import Sequence

import numpy as np

from .base import BaseCurve


class NelsonSiegelCurve(BaseCurve):
    """Nelson-Siegel zero curve.

    z(t) = b0 + b1 * g(t/l) + b2 * (g(t/l) - exp(-t/l)),  g(x) = (1 - exp(-x)) / x
    """

    NUMBER_OF_PARAMETERS = 4

    def __init__(self, name: str, parameters: Sequence[float]):
        super().__init__(name)
        if len(parameters) != self.NUMBER_OF_PARAMETERS:
            raise ValueError(
                f"Nelson-Siegel needs {self.NUMBER_OF_PARAMETERS} parameters, got {len(parameters)}"
            )
        self.beta0, self.beta1, self.beta2, lam = (float(p) for p in parameters)
        self.lam = max(abs(lam), 1.0e-6)

    @property
    def parameters(self) -> np.ndarray:
        return np.array([self.beta0, self.beta1, self.beta2, self.lam])

    def with_parameters(self, parameters) -> "NelsonSiegelCurve":
        return NelsonSiegelCurve(self.name, parameters)

    def zero(self, t: float) -> float:
        x = t / self.lam
        if x < 1.0e-10:
            return self.beta0 + self.beta1
        decay = math.exp(-x)
        loading = (1.0 - decay) / x
        return self.beta0 + self.beta1 * loading + self.beta2 * (loading - decay)

    def df(self, t: float) -> float:
        return math.exp(-self.zero(t) * t)
