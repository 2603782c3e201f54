"""
Calibration flavors.

A flavor decides the known-data container handed to the solver, the market
quote calculator and the sensitivity calculator, plus the descriptor rules
that differ between set-ups. Calculators are created per call; none is shared.
"""

from dataclasses import dataclass, replace
from typing import Mapping, Optional

from multicurve.calibration.calculators import (
    FiniteDifferenceSensitivityCalculator,
    HullWhiteParSpreadCalculator,
    IssuerParSpreadCalculator,
    ParSpreadMarketQuoteCalculator,
)
from multicurve.errors import ConfigurationError
from multicurve.market.currency import Currency
from multicurve.market.fx import FxMatrix
from multicurve.provider.forward import MulticurveForwardProvider
from multicurve.provider.hull_white import HullWhiteParameters, HullWhiteProvider
from multicurve.provider.issuer import IssuerProvider
from multicurve.provider.multicurve import MulticurveProvider


@dataclass(frozen=True)
class CurveFlavor:
    """Common behaviour; subclasses override the provider and calculator."""

    name = "curve"
    single_index_per_call = True
    supports_issuers = False

    def create_provider(
        self,
        discounting: Mapping,
        ibor: Mapping,
        overnight: Mapping,
        fx_matrix: FxMatrix,
    ) -> MulticurveProvider:
        return MulticurveProvider(discounting, ibor, overnight, fx_matrix)

    def calculator(self) -> ParSpreadMarketQuoteCalculator:
        return ParSpreadMarketQuoteCalculator()

    def sensitivity_calculator(self) -> FiniteDifferenceSensitivityCalculator:
        return FiniteDifferenceSensitivityCalculator()

    def validate(self) -> None:
        """Raise ConfigurationError when the flavor is not ready to calibrate."""


@dataclass(frozen=True)
class DiscountingFlavor(CurveFlavor):
    """Discounting curves by currency, forward curves as pseudo-discount factors."""

    name = "discounting"


@dataclass(frozen=True)
class ForwardDirectFlavor(CurveFlavor):
    """Ibor curves hold the forward rates themselves."""

    name = "forward-direct"

    def create_provider(self, discounting, ibor, overnight, fx_matrix) -> MulticurveForwardProvider:
        return MulticurveForwardProvider(discounting, ibor, overnight, fx_matrix)


@dataclass(frozen=True)
class IssuerFlavor(CurveFlavor):
    """Adds issuer curves for bond discounting."""

    name = "issuer"
    single_index_per_call = False
    supports_issuers = True

    def create_provider(self, discounting, ibor, overnight, fx_matrix) -> IssuerProvider:
        return IssuerProvider(discounting, ibor, overnight, fx_matrix)

    def calculator(self) -> IssuerParSpreadCalculator:
        return IssuerParSpreadCalculator()


@dataclass(frozen=True)
class HullWhiteFlavor(CurveFlavor):
    """Futures priced with a one-factor Hull-White convexity adjustment."""

    parameters: Optional[HullWhiteParameters] = None
    currency: Optional[Currency] = None

    name = "hull-white"
    single_index_per_call = False

    def with_parameters(self, parameters: HullWhiteParameters) -> "HullWhiteFlavor":
        if not isinstance(parameters, HullWhiteParameters):
            raise ConfigurationError(f"Not Hull-White parameters: {parameters!r}")
        return replace(self, parameters=parameters)

    def with_currency(self, currency: Currency) -> "HullWhiteFlavor":
        if not isinstance(currency, Currency):
            raise ConfigurationError(f"Not a currency: {currency!r}")
        return replace(self, currency=currency)

    def validate(self) -> None:
        if self.parameters is None:
            raise ConfigurationError("Hull-White parameters have not been set")
        if self.currency is None:
            raise ConfigurationError("Hull-White currency has not been set")

    def create_provider(self, discounting, ibor, overnight, fx_matrix) -> HullWhiteProvider:
        return HullWhiteProvider(self.parameters, self.currency, discounting, ibor, overnight, fx_matrix)

    def calculator(self) -> HullWhiteParSpreadCalculator:
        return HullWhiteParSpreadCalculator()

    def without_convexity_adjustment(self) -> DiscountingFlavor:
        return DiscountingFlavor()
