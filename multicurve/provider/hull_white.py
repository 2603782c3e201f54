"""
One-factor Hull-White model parameters and the provider carrying them.
"""

import math
from dataclasses import dataclass, field
from typing import Tuple

from multicurve.errors import ConfigurationError
from multicurve.market.currency import Currency

from .multicurve import MulticurveProvider


@dataclass(frozen=True)
class HullWhiteParameters:
    """Hull-White one-factor model with piecewise constant volatility.

    ``volatilities[i]`` applies between ``volatility_times[i - 1]`` and
    ``volatility_times[i]``; the first from 0, the last without bound.
    """

    mean_reversion: float
    volatilities: Tuple[float, ...]
    volatility_times: Tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "volatilities", tuple(float(v) for v in self.volatilities))
        object.__setattr__(self, "volatility_times", tuple(float(t) for t in self.volatility_times))
        if self.mean_reversion <= 0:
            raise ConfigurationError(f"Mean reversion must be positive, got {self.mean_reversion}")
        if not self.volatilities:
            raise ConfigurationError("At least one volatility is required")
        if len(self.volatility_times) != len(self.volatilities) - 1:
            raise ConfigurationError(
                f"Expected {len(self.volatilities) - 1} volatility times, got {len(self.volatility_times)}"
            )
        if any(b <= a for a, b in zip(self.volatility_times, self.volatility_times[1:])):
            raise ConfigurationError("Volatility times must be strictly increasing")

    def future_convexity_factor(self, last_trading: float, fixing_start: float, fixing_end: float) -> float:
        """Ratio between futures and forward growth factors for a STIR future."""
        a = self.mean_reversion
        factor1 = math.exp(-a * fixing_start) - math.exp(-a * fixing_end)
        numerator = 2.0 * a ** 3
        # Volatility periods up to the last trading time
        bounds = [0.0] + [t for t in self.volatility_times if t < last_trading] + [last_trading]
        factor2 = 0.0
        for i, (s0, s1) in enumerate(zip(bounds[:-1], bounds[1:])):
            sigma = self.volatilities[i]
            factor2 += sigma * sigma * (math.exp(a * s1) - math.exp(a * s0)) * (
                2.0 - math.exp(-a * (fixing_end - s1)) - math.exp(-a * (fixing_end - s0))
            )
        return math.exp(factor1 / numerator * factor2)


class HullWhiteProvider(MulticurveProvider):
    """Multi-curve provider with Hull-White parameters for one currency."""

    def __init__(
        self,
        parameters: HullWhiteParameters,
        currency: Currency,
        discounting_curves=None,
        ibor_curves=None,
        overnight_curves=None,
        fx_matrix=None,
    ):
        super().__init__(discounting_curves, ibor_curves, overnight_curves, fx_matrix)
        self.parameters = parameters
        self.currency = currency
