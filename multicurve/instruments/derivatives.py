"""
Priced (time-based) instruments used as calibration nodes.

All times are ACT/365F year fractions from the valuation date. Each
instrument knows its maturity time, the end time of its last fixing period
and its analytic initial-guess rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from multicurve.market.currency import Currency
from multicurve.market.indices import IborIndex, OvernightIndex
from multicurve.market.legal_entity import LegalEntity


class InstrumentDerivative:  # pragma: no cover - interface
    """Common interface for calibration instruments."""

    currency: Currency

    def maturity_time(self) -> float:
        raise NotImplementedError

    def last_fixing_end_time(self) -> float:
        raise NotImplementedError

    def initial_rate(self) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class Cash(InstrumentDerivative):
    """Money-market deposit."""

    currency: Currency
    start_time: float
    end_time: float
    accrual_factor: float
    rate: float

    def maturity_time(self) -> float:
        return self.end_time

    def last_fixing_end_time(self) -> float:
        return self.end_time

    def initial_rate(self) -> float:
        return self.rate


@dataclass(frozen=True)
class ForwardRateAgreement(InstrumentDerivative):
    """FRA on an ibor index, settled at the start of the fixing period."""

    currency: Currency
    index: IborIndex
    payment_time: float
    fixing_period_start: float
    fixing_period_end: float
    fixing_accrual: float
    rate: float

    def maturity_time(self) -> float:
        return self.fixing_period_end

    def last_fixing_end_time(self) -> float:
        return self.fixing_period_end

    def initial_rate(self) -> float:
        return self.rate


@dataclass(frozen=True)
class FixedCoupon:
    payment_time: float
    accrual: float


@dataclass(frozen=True)
class FloatingCoupon:
    """Ibor or compounded overnight coupon.

    ``fixed_rate`` is set when the whole rate is already known from fixings.
    ``accrued_factor`` is the compounded growth of an overnight coupon up to
    the valuation date, in which case ``fixing_start`` is zero and
    ``fixing_accrual`` covers the remaining period only.
    """

    index: Union[IborIndex, OvernightIndex]
    payment_time: float
    accrual: float
    fixing_start: float
    fixing_end: float
    fixing_accrual: float
    spread: float = 0.0
    fixed_rate: Optional[float] = None
    accrued_factor: float = 1.0


@dataclass(frozen=True)
class Swap(InstrumentDerivative):
    """Fixed versus floating swap, quoted by its fixed rate."""

    currency: Currency
    fixed_rate: float
    fixed_leg: Tuple[FixedCoupon, ...]
    floating_leg: Tuple[FloatingCoupon, ...]

    def maturity_time(self) -> float:
        times = [c.payment_time for c in self.fixed_leg] + [c.payment_time for c in self.floating_leg]
        return max(times)

    def last_fixing_end_time(self) -> float:
        if not self.floating_leg:
            return self.maturity_time()
        return max(c.fixing_end for c in self.floating_leg)

    def initial_rate(self) -> float:
        return self.fixed_rate


@dataclass(frozen=True)
class InterestRateFuture(InstrumentDerivative):
    """Short-term interest rate future, quoted as 1 - rate."""

    currency: Currency
    index: IborIndex
    last_trading_time: float
    fixing_period_start: float
    fixing_period_end: float
    fixing_accrual: float
    price: float

    def maturity_time(self) -> float:
        return self.fixing_period_end

    def last_fixing_end_time(self) -> float:
        return self.fixing_period_end

    def initial_rate(self) -> float:
        return 1.0 - self.price


@dataclass(frozen=True)
class FixedCouponBond(InstrumentDerivative):
    """Fixed coupon bond per unit nominal, quoted by dirty price."""

    currency: Currency
    issuer: LegalEntity
    settlement_time: float
    coupon_rate: float
    coupons: Tuple[FixedCoupon, ...]
    dirty_price: float

    def maturity_time(self) -> float:
        return self.coupons[-1].payment_time

    def last_fixing_end_time(self) -> float:
        return self.maturity_time()

    def initial_rate(self) -> float:
        return self.coupon_rate
