from datetime import date

import pytest

from multicurve.conventions import (
    ACT_360,
    THIRTY_360U,
    USNY,
    WEEKEND_ONLY,
    BusinessDayAdjustment,
    Frequency,
    add_tenor,
    adjust_date,
    generate_schedule,
    get_calendar,
    get_day_count_convention,
    parse_tenor,
    time_between,
)


class TestDayCount:
    def test_year_fractions(self):
        assert ACT_360.year_fraction(date(2024, 1, 15), date(2024, 4, 15)) == pytest.approx(91 / 360)
        assert THIRTY_360U.year_fraction(date(2024, 1, 15), date(2024, 7, 15)) == pytest.approx(0.5)
        assert time_between(date(2024, 1, 15), date(2025, 1, 15)) == pytest.approx(366 / 365)

    def test_lookup(self):
        assert get_day_count_convention("actual/360") == ACT_360
        with pytest.raises(ValueError, match="Unknown day count convention"):
            get_day_count_convention("BUS/252")


class TestCalendars:
    def test_holidays(self):
        assert not WEEKEND_ONLY.is_business_day(date(2024, 1, 13))
        assert WEEKEND_ONLY.is_business_day(date(2024, 1, 15))
        # Martin Luther King Jr. Day
        assert USNY.add_business_days(date(2024, 1, 12), 1) == date(2024, 1, 16)
        assert get_calendar("USD") is USNY
        with pytest.raises(ValueError):
            get_calendar("XXX")


class TestDates:
    @pytest.mark.parametrize(
        "adjustment, expected",
        [
            (BusinessDayAdjustment.FOLLOWING, date(2024, 4, 1)),
            (BusinessDayAdjustment.MODIFIED_FOLLOWING, date(2024, 3, 29)),
            (BusinessDayAdjustment.PRECEDING, date(2024, 3, 29)),
            (BusinessDayAdjustment.NO_ADJUSTMENT, date(2024, 3, 30)),
        ],
    )
    def test_adjust(self, adjustment, expected):
        assert adjust_date(date(2024, 3, 30), adjustment, WEEKEND_ONLY) == expected

    def test_end_of_month(self):
        assert add_tenor(date(2024, 4, 30), "1M", WEEKEND_ONLY, end_of_month=True) == date(2024, 5, 31)
        assert add_tenor(date(2024, 4, 30), "1M", WEEKEND_ONLY) == date(2024, 5, 30)

    def test_schedule_with_stub(self):
        schedule = generate_schedule(date(2024, 1, 17), date(2024, 10, 17), 6, WEEKEND_ONLY)
        assert schedule == [date(2024, 1, 17), date(2024, 7, 17), date(2024, 10, 17)]

    @pytest.mark.parametrize("tenor", ["3X", "M", ""])
    def test_bad_tenor(self, tenor):
        with pytest.raises(ValueError, match="Unsupported tenor"):
            parse_tenor(tenor)

    @pytest.mark.parametrize("tenor, expected", [("3M", Frequency.QUARTERLY), ("1Y", Frequency.ANNUAL)])
    def test_frequency_from_tenor(self, tenor, expected):
        assert Frequency.from_tenor(tenor) == expected
        assert Frequency.from_tenor(tenor).periods_per_year() == 12 // expected.months()

    def test_frequency_unknown(self):
        with pytest.raises(ValueError):
            Frequency.from_tenor("5M")
