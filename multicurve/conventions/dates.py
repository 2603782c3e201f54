"""
Business day adjustment, spot lag handling and tenor arithmetic.
"""

from datetime import date, datetime, timedelta
from typing import List, Union

from dateutil.relativedelta import relativedelta

from .calendars import Calendar
from .types import BusinessDayAdjustment


def adjust_date(
    dt: Union[date, datetime], adjustment: BusinessDayAdjustment, calendar: Calendar
) -> date:
    """Apply business day adjustment to a date."""
    if isinstance(dt, datetime):
        dt = dt.date()

    if adjustment == BusinessDayAdjustment.NO_ADJUSTMENT:
        return dt

    if adjustment == BusinessDayAdjustment.FOLLOWING:
        while not calendar.is_business_day(dt):
            dt += timedelta(days=1)
        return dt

    if adjustment == BusinessDayAdjustment.MODIFIED_FOLLOWING:
        adjusted = dt
        while not calendar.is_business_day(adjusted):
            adjusted += timedelta(days=1)
        # Month changed, use preceding instead
        if adjusted.month != dt.month:
            adjusted = dt
            while not calendar.is_business_day(adjusted):
                adjusted -= timedelta(days=1)
        return adjusted

    if adjustment == BusinessDayAdjustment.PRECEDING:
        while not calendar.is_business_day(dt):
            dt -= timedelta(days=1)
        return dt

    if adjustment == BusinessDayAdjustment.MODIFIED_PRECEDING:
        adjusted = dt
        while not calendar.is_business_day(adjusted):
            adjusted -= timedelta(days=1)
        if adjusted.month != dt.month:
            adjusted = dt
            while not calendar.is_business_day(adjusted):
                adjusted += timedelta(days=1)
        return adjusted

    raise ValueError(f"Unknown business day adjustment: {adjustment}")


def is_end_of_month(dt: date) -> bool:
    """Check if date is the last calendar day of its month."""
    return (dt + timedelta(days=1)).month != dt.month


def add_months(dt: Union[date, datetime], months: int, end_of_month: bool = False) -> date:
    """Add calendar months, snapping to month end when ``end_of_month`` applies."""
    if isinstance(dt, datetime):
        dt = dt.date()
    shifted = dt + relativedelta(months=months)
    if end_of_month and is_end_of_month(dt):
        return shifted + relativedelta(day=31)
    return shifted


def parse_tenor(tenor: str) -> relativedelta:
    """Convert a tenor string ('1D', '2W', '3M', '10Y') to a relativedelta."""
    t = tenor.upper().strip()
    if len(t) < 2 or not t[:-1].isdigit():
        raise ValueError(f"Unsupported tenor: {tenor}")
    amount = int(t[:-1])
    unit = t[-1]
    if unit == "D":
        return relativedelta(days=amount)
    if unit == "W":
        return relativedelta(weeks=amount)
    if unit == "M":
        return relativedelta(months=amount)
    if unit == "Y":
        return relativedelta(years=amount)
    raise ValueError(f"Unsupported tenor: {tenor}")


def get_spot_date(trade_date: Union[date, datetime], calendar: Calendar, spot_lag: int) -> date:
    """Get spot date from trade date by adding ``spot_lag`` business days."""
    return calendar.add_business_days(trade_date, spot_lag)


def add_tenor(
    start_date: Union[date, datetime],
    tenor: str,
    calendar: Calendar,
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    end_of_month: bool = False,
) -> date:
    """Add a tenor to a date and adjust the result to a business day."""
    if isinstance(start_date, datetime):
        start_date = start_date.date()
    period = parse_tenor(tenor)
    if period.months or period.years:
        unadjusted = add_months(start_date, period.months + 12 * period.years, end_of_month)
    else:
        unadjusted = start_date + period
    return adjust_date(unadjusted, business_day_adjustment, calendar)


def generate_schedule(
    start_date: date,
    end_date: date,
    months: int,
    calendar: Calendar,
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    end_of_month: bool = False,
) -> List[date]:
    """Generate adjusted period boundaries from ``start_date`` to ``end_date``.

    Periods roll forward from the unadjusted start; a short final stub is
    produced when the tenor is not a multiple of the period length.
    """
    if end_date <= start_date:
        raise ValueError(f"End date {end_date} must be after start date {start_date}")
    dates: List[date] = [start_date]
    i = 1
    while True:
        unadjusted = add_months(start_date, months * i, end_of_month)
        next_date = adjust_date(unadjusted, business_day_adjustment, calendar)
        if next_date >= end_date:
            dates.append(end_date)
            break
        dates.append(next_date)
        i += 1
    return dates
