"""
Date-based instrument definitions.

A definition carries trade dates and conventions; ``to_derivative`` turns it
into the time-based instrument priced during calibration, resolving past
fixings against the supplied fixing series.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List

import pandas as pd

from multicurve.conventions.daycount import (
    ACT_360,
    THIRTY_360U,
    DayCountConvention,
    time_between,
)
from multicurve.conventions.dates import add_tenor, adjust_date, generate_schedule, get_spot_date
from multicurve.conventions.types import BusinessDayAdjustment, Frequency
from multicurve.conventions.calendars import WEEKEND_ONLY, Calendar
from multicurve.errors import StateError
from multicurve.market.currency import Currency
from multicurve.market.fixings import Fixings, get_fixing
from multicurve.market.indices import IborIndex, OvernightIndex
from multicurve.market.legal_entity import LegalEntity

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


class InstrumentDefinition:  # pragma: no cover - interface
    """Instrument described by dates; converted to a derivative per valuation date."""

    def to_derivative(self, valuation_date: date, fixings: Fixings) -> InstrumentDerivative:
        raise NotImplementedError


def _ibor_fixing_date(index: IborIndex, accrual_start: date) -> date:
    return index.calendar.add_business_days(accrual_start, -index.spot_lag)


def _ibor_coupon(
    index: IborIndex,
    accrual_start: date,
    accrual_end: date,
    valuation_date: date,
    fixings: Fixings,
) -> FloatingCoupon:
    fixing_end = add_tenor(
        accrual_start, index.tenor, index.calendar, index.business_day_adjustment, index.end_of_month
    )
    fixing_date = _ibor_fixing_date(index, accrual_start)
    fixed_rate = None
    if fixing_date <= valuation_date:
        fixed_rate = get_fixing(fixings, index, fixing_date)
        if fixed_rate is None and fixing_date < valuation_date:
            raise StateError(f"Missing fixing for {index.name} on {fixing_date.isoformat()}")
    return FloatingCoupon(
        index=index,
        payment_time=time_between(valuation_date, accrual_end),
        accrual=index.day_count.year_fraction(accrual_start, accrual_end),
        fixing_start=max(time_between(valuation_date, accrual_start), 0.0),
        fixing_end=time_between(valuation_date, fixing_end),
        fixing_accrual=index.day_count.year_fraction(accrual_start, fixing_end),
        fixed_rate=fixed_rate,
    )


def _compounded_fixings(
    index: OvernightIndex,
    accrual_start: date,
    valuation_date: date,
    fixings: Fixings,
) -> float:
    """Compounded growth factor of published fixings over [accrual_start, valuation_date)."""
    series = fixings.get(index)
    if series is None or series.empty:
        raise StateError(
            f"Missing fixings for {index.name} from {accrual_start.isoformat()} "
            f"to {valuation_date.isoformat()}"
        )
    window = series.loc[pd.Timestamp(accrual_start):pd.Timestamp(valuation_date - timedelta(days=1))]
    if window.empty or window.index[0].date() != accrual_start:
        raise StateError(f"Missing fixing for {index.name} on {accrual_start.isoformat()}")
    # Each fixing accrues until the next observation, the last one until valuation
    ends = list(window.index[1:]) + [pd.Timestamp(valuation_date)]
    days = pd.Series([(end - start).days for start, end in zip(window.index, ends)], index=window.index)
    denominator = 360.0 if index.day_count == ACT_360 else 365.0
    return float((1.0 + window * days / denominator).prod())


def _overnight_coupon(
    index: OvernightIndex,
    accrual_start: date,
    accrual_end: date,
    valuation_date: date,
    fixings: Fixings,
) -> FloatingCoupon:
    accrual = index.day_count.year_fraction(accrual_start, accrual_end)
    accrued_factor = 1.0
    start = accrual_start
    if accrual_start < valuation_date:
        accrued_factor = _compounded_fixings(index, accrual_start, valuation_date, fixings)
        start = valuation_date
    return FloatingCoupon(
        index=index,
        payment_time=time_between(valuation_date, accrual_end),
        accrual=accrual,
        fixing_start=time_between(valuation_date, start),
        fixing_end=time_between(valuation_date, accrual_end),
        fixing_accrual=index.day_count.year_fraction(start, accrual_end),
        accrued_factor=accrued_factor,
    )


def _fixed_leg(
    dates: List[date], day_count: DayCountConvention, valuation_date: date
) -> List[FixedCoupon]:
    return [
        FixedCoupon(
            payment_time=time_between(valuation_date, end),
            accrual=day_count.year_fraction(start, end),
        )
        for start, end in zip(dates[:-1], dates[1:])
        if end > valuation_date
    ]


@dataclass(frozen=True)
class CashDefinition(InstrumentDefinition):
    """Deposit from ``start_date`` to ``end_date`` at ``rate``."""

    currency: Currency
    start_date: date
    end_date: date
    rate: float
    day_count: DayCountConvention = ACT_360

    def to_derivative(self, valuation_date: date, fixings: Fixings) -> Cash:
        return Cash(
            currency=self.currency,
            start_time=time_between(valuation_date, self.start_date),
            end_time=time_between(valuation_date, self.end_date),
            accrual_factor=self.day_count.year_fraction(self.start_date, self.end_date),
            rate=self.rate,
        )

    @classmethod
    def from_tenor(
        cls,
        currency: Currency,
        trade_date: date,
        tenor: str,
        rate: float,
        spot_lag: int = 2,
        calendar: Calendar = WEEKEND_ONLY,
        day_count: DayCountConvention = ACT_360,
    ) -> "CashDefinition":
        start = get_spot_date(trade_date, calendar, spot_lag)
        end = add_tenor(start, tenor, calendar)
        return cls(currency, start, end, rate, day_count)


@dataclass(frozen=True)
class ForwardRateAgreementDefinition(InstrumentDefinition):
    """FRA on ``index`` for the accrual period starting at ``start_date``."""

    index: IborIndex
    start_date: date
    rate: float

    def to_derivative(self, valuation_date: date, fixings: Fixings) -> ForwardRateAgreement:
        index = self.index
        end = add_tenor(
            self.start_date, index.tenor, index.calendar, index.business_day_adjustment, index.end_of_month
        )
        if _ibor_fixing_date(index, self.start_date) < valuation_date:
            raise StateError(f"FRA on {index.name} starting {self.start_date.isoformat()} has already fixed")
        return ForwardRateAgreement(
            currency=index.currency,
            index=index,
            payment_time=time_between(valuation_date, self.start_date),
            fixing_period_start=time_between(valuation_date, self.start_date),
            fixing_period_end=time_between(valuation_date, end),
            fixing_accrual=index.day_count.year_fraction(self.start_date, end),
            rate=self.rate,
        )


@dataclass(frozen=True)
class SwapFixedIborDefinition(InstrumentDefinition):
    """Vanilla fixed versus ibor swap.

    The floating leg pays at the index tenor; the fixed leg at
    ``fixed_frequency`` with ``fixed_day_count``.
    """

    index: IborIndex
    start_date: date
    tenor: str
    fixed_rate: float
    fixed_frequency: Frequency = Frequency.SEMIANNUAL
    fixed_day_count: DayCountConvention = THIRTY_360U

    def end_date(self) -> date:
        return add_tenor(
            self.start_date, self.tenor, self.index.calendar,
            self.index.business_day_adjustment, self.index.end_of_month,
        )

    def to_derivative(self, valuation_date: date, fixings: Fixings) -> Swap:
        index = self.index
        end = self.end_date()
        fixed_dates = generate_schedule(
            self.start_date, end, self.fixed_frequency.months(), index.calendar,
            index.business_day_adjustment, index.end_of_month,
        )
        float_months = Frequency.from_tenor(index.tenor).months()
        float_dates = generate_schedule(
            self.start_date, end, float_months, index.calendar,
            index.business_day_adjustment, index.end_of_month,
        )
        floating = [
            _ibor_coupon(index, start, stop, valuation_date, fixings)
            for start, stop in zip(float_dates[:-1], float_dates[1:])
            if stop > valuation_date
        ]
        return Swap(
            currency=index.currency,
            fixed_rate=self.fixed_rate,
            fixed_leg=tuple(_fixed_leg(fixed_dates, self.fixed_day_count, valuation_date)),
            floating_leg=tuple(floating),
        )

    @classmethod
    def from_tenor(
        cls,
        index: IborIndex,
        trade_date: date,
        tenor: str,
        fixed_rate: float,
        fixed_frequency: Frequency = Frequency.SEMIANNUAL,
        fixed_day_count: DayCountConvention = THIRTY_360U,
    ) -> "SwapFixedIborDefinition":
        start = get_spot_date(trade_date, index.calendar, index.spot_lag)
        return cls(index, start, tenor, fixed_rate, fixed_frequency, fixed_day_count)


@dataclass(frozen=True)
class SwapFixedOvernightDefinition(InstrumentDefinition):
    """Fixed versus compounded overnight swap (OIS)."""

    index: OvernightIndex
    start_date: date
    tenor: str
    fixed_rate: float
    frequency: Frequency = Frequency.ANNUAL
    fixed_day_count: DayCountConvention = ACT_360
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING

    def to_derivative(self, valuation_date: date, fixings: Fixings) -> Swap:
        index = self.index
        end = add_tenor(self.start_date, self.tenor, index.calendar, self.business_day_adjustment)
        dates = generate_schedule(
            self.start_date, end, self.frequency.months(), index.calendar, self.business_day_adjustment
        )
        floating = [
            _overnight_coupon(index, start, stop, valuation_date, fixings)
            for start, stop in zip(dates[:-1], dates[1:])
            if stop > valuation_date
        ]
        return Swap(
            currency=index.currency,
            fixed_rate=self.fixed_rate,
            fixed_leg=tuple(_fixed_leg(dates, self.fixed_day_count, valuation_date)),
            floating_leg=tuple(floating),
        )

    @classmethod
    def from_tenor(
        cls,
        index: OvernightIndex,
        trade_date: date,
        tenor: str,
        fixed_rate: float,
        spot_lag: int = 2,
        frequency: Frequency = Frequency.ANNUAL,
    ) -> "SwapFixedOvernightDefinition":
        start = get_spot_date(trade_date, index.calendar, spot_lag)
        return cls(index, start, tenor, fixed_rate, frequency)


@dataclass(frozen=True)
class InterestRateFutureDefinition(InstrumentDefinition):
    """STIR future on ``index`` with the given last trading date and price."""

    index: IborIndex
    last_trading_date: date
    price: float

    def to_derivative(self, valuation_date: date, fixings: Fixings) -> InterestRateFuture:
        index = self.index
        if self.last_trading_date < valuation_date:
            raise StateError(
                f"Future on {index.name} expired on {self.last_trading_date.isoformat()}"
            )
        start = get_spot_date(self.last_trading_date, index.calendar, index.spot_lag)
        end = add_tenor(start, index.tenor, index.calendar, index.business_day_adjustment, index.end_of_month)
        return InterestRateFuture(
            currency=index.currency,
            index=index,
            last_trading_time=time_between(valuation_date, self.last_trading_date),
            fixing_period_start=time_between(valuation_date, start),
            fixing_period_end=time_between(valuation_date, end),
            fixing_accrual=index.day_count.year_fraction(start, end),
            price=self.price,
        )


@dataclass(frozen=True)
class FixedCouponBondDefinition(InstrumentDefinition):
    """Bullet fixed coupon bond quoted by dirty price per unit nominal."""

    issuer: LegalEntity
    currency: Currency
    start_date: date
    maturity_date: date
    coupon_rate: float
    dirty_price: float
    frequency: Frequency = Frequency.SEMIANNUAL
    day_count: DayCountConvention = THIRTY_360U
    settlement_days: int = 2
    calendar: Calendar = WEEKEND_ONLY

    def to_derivative(self, valuation_date: date, fixings: Fixings) -> FixedCouponBond:
        settlement = get_spot_date(valuation_date, self.calendar, self.settlement_days)
        if self.maturity_date <= settlement:
            raise StateError(
                f"Bond of {self.issuer.short_name} matured on {self.maturity_date.isoformat()}"
            )
        maturity = adjust_date(self.maturity_date, BusinessDayAdjustment.FOLLOWING, self.calendar)
        dates = generate_schedule(
            self.start_date, maturity, self.frequency.months(), self.calendar,
            BusinessDayAdjustment.FOLLOWING,
        )
        coupons = [
            FixedCoupon(
                payment_time=time_between(valuation_date, end),
                accrual=self.day_count.year_fraction(start, end),
            )
            for start, end in zip(dates[:-1], dates[1:])
            if end > settlement
        ]
        return FixedCouponBond(
            currency=self.currency,
            issuer=self.issuer,
            settlement_time=time_between(valuation_date, settlement),
            coupon_rate=self.coupon_rate,
            coupons=tuple(coupons),
            dirty_price=self.dirty_price,
        )
