"""
Ibor-like and overnight index definitions.
"""

from dataclasses import dataclass, field

from multicurve.conventions.calendars import Calendar, WEEKEND_ONLY
from multicurve.conventions.daycount import ACT_360, DayCountConvention
from multicurve.conventions.types import BusinessDayAdjustment

from .currency import Currency


@dataclass(frozen=True)
class IborIndex:
    """Term rate index (LIBOR / EURIBOR style).

    Attributes:
        name: Index name, e.g. "USD-LIBOR-3M"
        currency: Index currency
        tenor: Deposit tenor, e.g. "3M"
        spot_lag: Business days between fixing and accrual start
        day_count: Accrual day count of the index deposit
        business_day_adjustment: Adjustment applied to the deposit end date
        end_of_month: Whether the end-of-month rule applies
        calendar: Fixing and accrual calendar
    """

    name: str
    currency: Currency
    tenor: str
    spot_lag: int = 2
    day_count: DayCountConvention = ACT_360
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING
    end_of_month: bool = False
    calendar: Calendar = field(default=WEEKEND_ONLY, compare=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OvernightIndex:
    """Overnight rate index (SOFR, ESTR, SONIA style)."""

    name: str
    currency: Currency
    day_count: DayCountConvention = ACT_360
    publication_lag: int = 0
    calendar: Calendar = field(default=WEEKEND_ONLY, compare=False)

    def __str__(self) -> str:
        return self.name
