"""
Curve forms and node-time policies.

A curve form is one of four frozen variants; a descriptor holds at most one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from multicurve.conventions.types import CurveFunction
from multicurve.errors import ConfigurationError
from multicurve.instruments.node_time import (
    InstrumentMaturityCalculator,
    LastFixingEndTimeCalculator,
    NodeTimeCalculator,
)


@dataclass(frozen=True)
class ContinuousYield:
    """Continuously compounded zero rates, interpolated."""


@dataclass(frozen=True)
class PeriodicYield:
    """Yields compounded ``periods_per_year`` times a year, interpolated."""

    periods_per_year: int

    def __post_init__(self):
        if isinstance(self.periods_per_year, bool) or not isinstance(self.periods_per_year, int):
            raise ConfigurationError(f"Periods per year must be an integer, got {self.periods_per_year!r}")
        if self.periods_per_year <= 0:
            raise ConfigurationError(f"Periods per year must be positive, got {self.periods_per_year}")


@dataclass(frozen=True)
class ContinuousDiscountFactor:
    """Discount factors, interpolated."""


@dataclass(frozen=True)
class Functional:
    """Parametric curve."""

    function: CurveFunction


CurveForm = Union[ContinuousYield, PeriodicYield, ContinuousDiscountFactor, Functional]


class NodeTimePolicy(Enum):
    """Where an instrument places its curve node."""

    INSTRUMENT_MATURITY = "INSTRUMENT_MATURITY"
    LAST_FIXING_END = "LAST_FIXING_END"

    def calculator(self) -> NodeTimeCalculator:
        if self is NodeTimePolicy.LAST_FIXING_END:
            return LastFixingEndTimeCalculator()
        return InstrumentMaturityCalculator()
