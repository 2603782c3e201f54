"""
Base curve classes.

Curves are functions of time (ACT/365F year fractions from the valuation
date). Every curve exposes discount factors, continuously compounded zero
rates and simply compounded forwards.
"""

import math
from abc import ABC, abstractmethod
from typing import Protocol, Sequence

import numpy as np

from multicurve.errors import UnsupportedOperationError

# Zero rate at t <= 0 is read at this short time
_SHORT_END = 1.0e-6


class Curve(Protocol):
    """Protocol defining the interface for all curves."""

    name: str

    def df(self, t: float) -> float:
        ...

    def zero(self, t: float) -> float:
        ...

    def forward_rate(self, start: float, end: float, accrual: float) -> float:
        ...


class BaseCurve(ABC):
    """Base implementation for time-based yield curves."""

    def __init__(self, name: str = ""):
        self.name = name

    @abstractmethod
    def df(self, t: float) -> float:
        """Get discount factor at time t."""

    def zero(self, t: float) -> float:
        """Get continuously compounded zero rate at time t."""
        t = max(t, _SHORT_END)
        df_val = self.df(t)
        if df_val <= 0:
            raise ValueError(f"Non-positive discount factor: {df_val}")
        return -math.log(df_val) / t

    def forward_rate(self, start: float, end: float, accrual: float) -> float:
        """Simply compounded forward rate over [start, end] with the given accrual."""
        if accrual <= 0:
            raise ValueError("Forward period must be positive")
        return (self.df(start) / self.df(end) - 1.0) / accrual

    @property
    def parameters(self) -> np.ndarray:
        """Values the curve is built from; empty when the curve has none."""
        return np.zeros(0)

    def with_parameters(self, parameters: Sequence[float]) -> "BaseCurve":
        """The same curve rebuilt on new parameter values."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot be rebuilt from parameters"
        )

    def __str__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.name})"
            if self.name
            else self.__class__.__name__
        )

    __repr__ = __str__
