"""
Base classes for curve interpolation methods.
"""
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np


class Interpolator(ABC):
    """Base class for curve interpolation methods."""

    name = ""

    def __init__(self, pillars: Sequence[float], values: Sequence[float]):
        """
        Initialize interpolator.

        Args:
            pillars: Node times (in years)
            values: Values to interpolate (yields, discount factors, ...)
        """
        if len(pillars) != len(values):
            raise ValueError("Pillars and values must have same length")
        if len(pillars) < 1:
            raise ValueError("Need at least 1 point for interpolation")

        order = np.argsort(np.asarray(pillars, dtype=float), kind="stable")
        self.pillars = np.asarray(pillars, dtype=float)[order]
        self.values = np.asarray(values, dtype=float)[order]

        if len(np.unique(self.pillars)) != len(self.pillars):
            raise ValueError("Duplicate pillar times not allowed")

    @abstractmethod
    def interpolate(self, t: float) -> float:
        """Interpolate value at time t."""

    def interpolate_many(self, times: Sequence[float]) -> np.ndarray:
        """Interpolate values at multiple times."""
        return np.array([self.interpolate(t) for t in times])

    def _extrapolate_flat(self, t: float) -> float:
        """Flat extrapolation beyond pillar range."""
        if t <= self.pillars[0]:
            return float(self.values[0])
        if t >= self.pillars[-1]:
            return float(self.values[-1])
        raise ValueError("Time is within pillar range, use interpolation")

    def _outside(self, t: float) -> bool:
        return len(self.pillars) == 1 or t <= self.pillars[0] or t >= self.pillars[-1]
