"""Calibration instruments: date-based definitions and time-based derivatives."""

from .conversion import convert, rates_initialization
from .definitions import (
    CashDefinition,
    FixedCouponBondDefinition,
    ForwardRateAgreementDefinition,
    InstrumentDefinition,
    InterestRateFutureDefinition,
    SwapFixedIborDefinition,
    SwapFixedOvernightDefinition,
)
from .derivatives import (
    Cash,
    FixedCoupon,
    FixedCouponBond,
    FloatingCoupon,
    ForwardRateAgreement,
    InstrumentDerivative,
    InterestRateFuture,
    Swap,
)
from .node_time import (
    InstrumentMaturityCalculator,
    LastFixingEndTimeCalculator,
    NodeTimeCalculator,
)

__all__ = [
    # Definitions
    "InstrumentDefinition",
    "CashDefinition",
    "ForwardRateAgreementDefinition",
    "SwapFixedIborDefinition",
    "SwapFixedOvernightDefinition",
    "InterestRateFutureDefinition",
    "FixedCouponBondDefinition",
    # Derivatives
    "InstrumentDerivative",
    "Cash",
    "ForwardRateAgreement",
    "FixedCoupon",
    "FloatingCoupon",
    "Swap",
    "InterestRateFuture",
    "FixedCouponBond",
    # Conversion
    "convert",
    "rates_initialization",
    # Node times
    "NodeTimeCalculator",
    "InstrumentMaturityCalculator",
    "LastFixingEndTimeCalculator",
]
