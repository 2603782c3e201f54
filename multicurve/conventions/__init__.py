"""Market conventions: day counts, calendars and date arithmetic."""

from .calendars import CALENDARS, TARGET, UK, USNY, WEEKEND_ONLY, Calendar, get_calendar
from .dates import (
    add_months,
    add_tenor,
    adjust_date,
    generate_schedule,
    get_spot_date,
    is_end_of_month,
    parse_tenor,
)
from .daycount import (
    ACT_360,
    ACT_365F,
    ACT_ACT,
    THIRTY_360E,
    THIRTY_360U,
    DayCountConvention,
    get_day_count_convention,
    time_between,
)
from .types import BusinessDayAdjustment, CurveFunction, Frequency

__all__ = [
    # Calendars
    "Calendar",
    "CALENDARS",
    "TARGET",
    "USNY",
    "UK",
    "WEEKEND_ONLY",
    "get_calendar",
    # Dates
    "add_months",
    "add_tenor",
    "adjust_date",
    "generate_schedule",
    "get_spot_date",
    "is_end_of_month",
    "parse_tenor",
    # Day counts
    "DayCountConvention",
    "ACT_360",
    "ACT_365F",
    "ACT_ACT",
    "THIRTY_360E",
    "THIRTY_360U",
    "get_day_count_convention",
    "time_between",
    # Enums
    "BusinessDayAdjustment",
    "CurveFunction",
    "Frequency",
]
