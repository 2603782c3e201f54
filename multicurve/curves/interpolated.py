"""
Interpolated curves: yields, periodic yields and discount factors on nodes.
"""

import math

import numpy as np

from multicurve.interpolation import Interpolator, create_interpolator

from .base import _SHORT_END, BaseCurve


class YieldCurve(BaseCurve):
    """Continuously compounded zero rates interpolated between nodes."""

    def __init__(self, name: str, interpolator: Interpolator):
        super().__init__(name)
        self.interpolator = interpolator

    @classmethod
    def from_nodes(cls, name, method, times, values) -> "YieldCurve":
        return cls(name, create_interpolator(method, times, values))

    @property
    def node_times(self) -> np.ndarray:
        return self.interpolator.pillars

    @property
    def node_values(self) -> np.ndarray:
        return self.interpolator.values

    @property
    def parameters(self) -> np.ndarray:
        return self.node_values.copy()

    def _interpolator_on(self, values) -> Interpolator:
        return type(self.interpolator)(self.node_times, values)

    def with_parameters(self, parameters) -> "YieldCurve":
        return YieldCurve(self.name, self._interpolator_on(parameters))

    def zero(self, t: float) -> float:
        return self.interpolator.interpolate(t)

    def df(self, t: float) -> float:
        return math.exp(-self.zero(t) * t)


class PeriodicYieldCurve(YieldCurve):
    """Yields compounded ``periods_per_year`` times a year, interpolated between nodes."""

    def __init__(self, name: str, interpolator: Interpolator, periods_per_year: int):
        if periods_per_year <= 0:
            raise ValueError("Periods per year must be positive")
        super().__init__(name, interpolator)
        self.periods_per_year = periods_per_year

    def with_parameters(self, parameters) -> "PeriodicYieldCurve":
        return PeriodicYieldCurve(self.name, self._interpolator_on(parameters), self.periods_per_year)

    def periodic_yield(self, t: float) -> float:
        return self.interpolator.interpolate(t)

    def df(self, t: float) -> float:
        n = self.periods_per_year
        return (1.0 + self.periodic_yield(t) / n) ** (-n * t)

    def zero(self, t: float) -> float:
        n = self.periods_per_year
        return n * math.log(1.0 + self.periodic_yield(max(t, _SHORT_END)) / n)


class DiscountFactorCurve(BaseCurve):
    """Discount factors interpolated between nodes, anchored at df(0) = 1."""

    def __init__(self, name: str, interpolator: Interpolator, anchored: bool = False):
        super().__init__(name)
        self.interpolator = interpolator
        # True when the df(0) = 1 node was added on top of the given nodes
        self.anchored = anchored

    @classmethod
    def from_nodes(cls, name, method, times, values) -> "DiscountFactorCurve":
        times = list(times)
        values = list(values)
        anchored = min(times) > 0
        if anchored:
            times = [0.0] + times
            values = [1.0] + values
        return cls(name, create_interpolator(method, times, values), anchored)

    @property
    def parameters(self) -> np.ndarray:
        values = self.interpolator.values
        return values[1:].copy() if self.anchored else values.copy()

    def with_parameters(self, parameters) -> "DiscountFactorCurve":
        values = list(parameters)
        if self.anchored:
            values = [1.0] + values
        return DiscountFactorCurve(
            self.name, type(self.interpolator)(self.interpolator.pillars, values), self.anchored
        )

    def df(self, t: float) -> float:
        if t <= 0:
            return 1.0
        return self.interpolator.interpolate(t)
