"""
Curve defined as an existing base curve plus (or minus) a spread curve.
"""

import numpy as np

from .base import BaseCurve


class SpreadCurve(BaseCurve):
    """Zero rates of ``base`` shifted by the zero rates of ``spread``.

    Only the spread is parameterised; the base stays as given.
    """

    def __init__(self, name: str, base: BaseCurve, spread: BaseCurve, subtract: bool = False):
        super().__init__(name)
        self.base = base
        self.spread = spread
        self.subtract = subtract

    @property
    def parameters(self) -> np.ndarray:
        return self.spread.parameters

    def with_parameters(self, parameters) -> "SpreadCurve":
        return SpreadCurve(self.name, self.base, self.spread.with_parameters(parameters), self.subtract)

    def with_base(self, base: BaseCurve) -> "SpreadCurve":
        return SpreadCurve(self.name, base, self.spread, self.subtract)

    def df(self, t: float) -> float:
        if self.subtract:
            return self.base.df(t) / self.spread.df(t)
        return self.base.df(t) * self.spread.df(t)

    def zero(self, t: float) -> float:
        sign = -1.0 if self.subtract else 1.0
        return self.base.zero(t) + sign * self.spread.zero(t)
