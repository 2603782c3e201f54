"""
Curve generators.

A generator turns a parameter vector into a curve. Generators built from a
curve-type descriptor may still need the sorted calibration instruments to
place their nodes; ``final_generator`` returns the generator ready for
calibration.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

import numpy as np

from multicurve.errors import ConfigurationError, StateError
from multicurve.interpolation import create_interpolator

from .base import BaseCurve
from .functional import NelsonSiegelCurve
from .interpolated import DiscountFactorCurve, PeriodicYieldCurve, YieldCurve
from .spread import SpreadCurve

logger = logging.getLogger(__name__)

NodeTimeFunction = Callable[[object], float]


class CurveGenerator(ABC):
    """Builds curves from parameter vectors."""

    def final_generator(self, instruments: Sequence[object]) -> "CurveGenerator":
        return self

    def initial_guess(self, seeds: Sequence[float]) -> np.ndarray:
        return np.asarray(seeds, dtype=float)

    @abstractmethod
    def number_of_parameters(self) -> int:
        """Length of the parameter vector."""

    @abstractmethod
    def generate_curve(self, name: str, parameters: Sequence[float], provider=None) -> BaseCurve:
        """Build the named curve; ``provider`` resolves curves this one depends on."""


class InterpolatedCurveGenerator(CurveGenerator):
    """Curve interpolated on nodes.

    Nodes are either fixed up front (``node_times``) or placed at the times
    returned by ``node_time_calculator`` for each calibration instrument.
    """

    def __init__(
        self,
        interpolator: str,
        node_times: Optional[Sequence[float]] = None,
        node_time_calculator: Optional[NodeTimeFunction] = None,
    ):
        if node_times is None and node_time_calculator is None:
            raise ConfigurationError("Either node times or a node time calculator is required")
        self.interpolator = interpolator
        self.node_times = None if node_times is None else np.asarray(node_times, dtype=float)
        self.node_time_calculator = node_time_calculator

    def _with_times(self, node_times) -> "InterpolatedCurveGenerator":
        return type(self)(self.interpolator, node_times=node_times)

    def final_generator(self, instruments: Sequence[object]) -> "InterpolatedCurveGenerator":
        if self.node_times is not None:
            return self
        times = [self.node_time_calculator(instrument) for instrument in instruments]
        logger.debug("Node times %s", times)
        return self._with_times(times)

    def number_of_parameters(self) -> int:
        if self.node_times is None:
            raise StateError("Node times are only known once the generator is finalised")
        return len(self.node_times)

    def initial_guess(self, seeds: Sequence[float]) -> np.ndarray:
        seeds = np.asarray(seeds, dtype=float)
        n = self.number_of_parameters()
        if len(seeds) == n:
            return seeds.copy()
        # Node dates not aligned with instruments
        level = float(seeds.mean()) if len(seeds) else 0.0
        return np.full(n, level)


class YieldGenerator(InterpolatedCurveGenerator):
    """Interpolated continuously compounded zero rates."""

    def generate_curve(self, name, parameters, provider=None) -> YieldCurve:
        return YieldCurve.from_nodes(name, self.interpolator, self.node_times, parameters)


class PeriodicYieldGenerator(InterpolatedCurveGenerator):
    """Interpolated periodically compounded yields."""

    def __init__(self, interpolator, periods_per_year: int, node_times=None, node_time_calculator=None):
        super().__init__(interpolator, node_times, node_time_calculator)
        self.periods_per_year = periods_per_year

    def _with_times(self, node_times) -> "PeriodicYieldGenerator":
        return PeriodicYieldGenerator(self.interpolator, self.periods_per_year, node_times=node_times)

    def initial_guess(self, seeds: Sequence[float]) -> np.ndarray:
        n = self.periods_per_year
        continuous = super().initial_guess(seeds)
        return n * (np.exp(continuous / n) - 1.0)

    def generate_curve(self, name, parameters, provider=None) -> PeriodicYieldCurve:
        interpolator = create_interpolator(self.interpolator, self.node_times, parameters)
        return PeriodicYieldCurve(name, interpolator, self.periods_per_year)


class DiscountFactorGenerator(InterpolatedCurveGenerator):
    """Interpolated discount factors."""

    def initial_guess(self, seeds: Sequence[float]) -> np.ndarray:
        rates = super().initial_guess(seeds)
        return np.exp(-rates * self.node_times)

    def generate_curve(self, name, parameters, provider=None) -> DiscountFactorCurve:
        return DiscountFactorCurve.from_nodes(name, self.interpolator, self.node_times, parameters)


class NelsonSiegelGenerator(CurveGenerator):
    """Four-parameter Nelson-Siegel curve."""

    def number_of_parameters(self) -> int:
        return NelsonSiegelCurve.NUMBER_OF_PARAMETERS

    def initial_guess(self, seeds: Sequence[float]) -> np.ndarray:
        if len(seeds) == 0:
            return np.array([0.01, 0.01, 0.01, 1.0])
        return np.array([seeds[-1], seeds[0] - seeds[-1], 0.0, 1.0], dtype=float)

    def generate_curve(self, name, parameters, provider=None) -> NelsonSiegelCurve:
        return NelsonSiegelCurve(name, parameters)


class SpreadGenerator(CurveGenerator):
    """Curve built as an existing base curve plus a calibrated spread curve."""

    def __init__(self, generator: CurveGenerator, base_curve_name: str, subtract: bool = False):
        self.generator = generator
        self.base_curve_name = base_curve_name
        self.subtract = subtract

    def final_generator(self, instruments) -> "SpreadGenerator":
        return SpreadGenerator(
            self.generator.final_generator(instruments), self.base_curve_name, self.subtract
        )

    def number_of_parameters(self) -> int:
        return self.generator.number_of_parameters()

    def initial_guess(self, seeds: Sequence[float]) -> np.ndarray:
        return self.generator.initial_guess(seeds)

    def generate_curve(self, name, parameters, provider=None) -> SpreadCurve:
        base = provider.get_curve(self.base_curve_name) if provider is not None else None
        if base is None:
            raise StateError(
                f"Base curve {self.base_curve_name} of spread curve {name} is not available"
            )
        spread = self.generator.generate_curve(f"{name}-SPREAD", parameters, provider)
        return SpreadCurve(name, base, spread, self.subtract)
