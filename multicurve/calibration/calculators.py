"""
Par-spread market quote calculators and the finite-difference sensitivity
calculator.

A calculator maps an instrument and a provider to the difference between the
model quote and the market quote; calibration drives these to zero.
"""

from typing import Callable, Union

import numpy as np

from multicurve.errors import UnsupportedOperationError
from multicurve.instruments.derivatives import (
    Cash,
    FixedCouponBond,
    FloatingCoupon,
    ForwardRateAgreement,
    InstrumentDerivative,
    InterestRateFuture,
    Swap,
)
from multicurve.market.indices import IborIndex
from multicurve.provider.hull_white import HullWhiteProvider
from multicurve.provider.issuer import IssuerProvider
from multicurve.provider.multicurve import MulticurveProvider


class ParSpreadMarketQuoteCalculator:
    """Model rate minus quoted rate for rate instruments."""

    def __call__(self, instrument: InstrumentDerivative, provider: MulticurveProvider) -> float:
        if isinstance(instrument, Cash):
            return self.cash(instrument, provider)
        if isinstance(instrument, ForwardRateAgreement):
            return self.fra(instrument, provider)
        if isinstance(instrument, Swap):
            return self.swap(instrument, provider)
        if isinstance(instrument, InterestRateFuture):
            return self.future(instrument, provider)
        if isinstance(instrument, FixedCouponBond):
            return self.bond(instrument, provider)
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot price {type(instrument).__name__}"
        )

    def cash(self, cash: Cash, provider: MulticurveProvider) -> float:
        curve = provider.discounting_curve(cash.currency)
        model = curve.forward_rate(cash.start_time, cash.end_time, cash.accrual_factor)
        return model - cash.rate

    def fra(self, fra: ForwardRateAgreement, provider: MulticurveProvider) -> float:
        forward = provider.forward_rate(
            fra.index, fra.fixing_period_start, fra.fixing_period_end, fra.fixing_accrual
        )
        return forward - fra.rate

    def swap(self, swap: Swap, provider: MulticurveProvider) -> float:
        curve = provider.discounting_curve(swap.currency)
        annuity = sum(c.accrual * curve.df(c.payment_time) for c in swap.fixed_leg)
        floating = sum(
            self.coupon_rate(c, provider) * c.accrual * curve.df(c.payment_time)
            for c in swap.floating_leg
        )
        return floating / annuity - swap.fixed_rate

    def coupon_rate(self, coupon: FloatingCoupon, provider: MulticurveProvider) -> float:
        if coupon.fixed_rate is not None:
            return coupon.fixed_rate + coupon.spread
        if isinstance(coupon.index, IborIndex):
            forward = provider.forward_rate(
                coupon.index, coupon.fixing_start, coupon.fixing_end, coupon.fixing_accrual
            )
            return forward + coupon.spread
        growth = 1.0
        if coupon.fixing_accrual > 0:
            forward = provider.forward_rate(
                coupon.index, coupon.fixing_start, coupon.fixing_end, coupon.fixing_accrual
            )
            growth = 1.0 + forward * coupon.fixing_accrual
        return (coupon.accrued_factor * growth - 1.0) / coupon.accrual + coupon.spread

    def future(self, future: InterestRateFuture, provider: MulticurveProvider) -> float:
        forward = provider.forward_rate(
            future.index, future.fixing_period_start, future.fixing_period_end, future.fixing_accrual
        )
        return forward - (1.0 - future.price)

    def bond(self, bond: FixedCouponBond, provider: MulticurveProvider) -> float:
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot price bonds; use the issuer calculator"
        )


class IssuerParSpreadCalculator(ParSpreadMarketQuoteCalculator):
    """Adds bonds, priced on their issuer curve: model dirty price minus quoted price."""

    def bond(self, bond: FixedCouponBond, provider: IssuerProvider) -> float:
        curve = provider.issuer_curve(bond.issuer)
        coupons = sum(bond.coupon_rate * c.accrual * curve.df(c.payment_time) for c in bond.coupons)
        principal = curve.df(bond.maturity_time())
        return (coupons + principal) / curve.df(bond.settlement_time) - bond.dirty_price


class HullWhiteParSpreadCalculator(ParSpreadMarketQuoteCalculator):
    """Futures carry the Hull-White one-factor convexity adjustment."""

    def future(self, future: InterestRateFuture, provider: HullWhiteProvider) -> float:
        forward = provider.forward_rate(
            future.index, future.fixing_period_start, future.fixing_period_end, future.fixing_accrual
        )
        factor = provider.parameters.future_convexity_factor(
            future.last_trading_time, future.fixing_period_start, future.fixing_period_end
        )
        delta = future.fixing_accrual
        futures_rate = (factor * (1.0 + delta * forward) - 1.0) / delta
        return futures_rate - (1.0 - future.price)


class FiniteDifferenceSensitivityCalculator:
    """Jacobian of a vector function by forward differences."""

    def __init__(self, shift: float = 1.0e-7):
        if shift <= 0:
            raise ValueError("Shift must be positive")
        self.shift = shift

    def jacobian(
        self,
        func: Callable[[np.ndarray], np.ndarray],
        x: np.ndarray,
        fx: Union[np.ndarray, None] = None,
    ) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        base = func(x) if fx is None else fx
        jac = np.empty((len(base), len(x)))
        for j in range(len(x)):
            bumped = x.copy()
            bumped[j] += self.shift
            jac[:, j] = (func(bumped) - base) / self.shift
        return jac
