"""
Tests for the range predicates and the open-ended staleness rule.
"""
from datetime import date, timedelta

from app.parsers import DateRange, PowerRange
from app.services import (
    commissioning_date_matches,
    date_in_range,
    is_stale_open_ended,
    power_in_range,
)

DAY = timedelta(days=1)


class TestDateInRange:

    def test_inclusive_endpoints(self):
        period = DateRange(date(2005, 1, 1), date(2005, 12, 31))
        assert date_in_range(date(2005, 1, 1), period)
        assert date_in_range(date(2005, 12, 31), period)
        assert date_in_range(date(2005, 6, 15), period)

    def test_one_day_outside(self):
        period = DateRange(date(2005, 1, 1), date(2005, 12, 31))
        assert not date_in_range(date(2004, 12, 31), period)
        assert not date_in_range(date(2006, 1, 1), period)

    def test_open_ended_has_no_upper_bound(self):
        period = DateRange(date(2017, 7, 25))
        assert date_in_range(date(2023, 1, 1), period)
        assert not date_in_range(date(2017, 7, 24), period)


class TestPowerInRange:

    def test_inclusive_endpoints(self):
        power = PowerRange(10, 40)
        assert power_in_range(10, power)
        assert power_in_range(40, power)

    def test_one_unit_outside(self):
        power = PowerRange(10, 40)
        assert not power_in_range(9, power)
        assert not power_in_range(41, power)

    def test_unlimited(self):
        assert power_in_range(1_000_000, PowerRange(100))

    def test_zero_upper_bound_is_a_real_bound(self):
        power = PowerRange(0, 0)
        assert power_in_range(0, power)
        assert not power_in_range(0.5, power)


class TestStaleness:
    """Open-ended periods stop matching one year after their start."""

    START = date(2017, 7, 25)

    def test_boundaries(self):
        period = DateRange(self.START)
        assert commissioning_date_matches(self.START, period)
        assert not commissioning_date_matches(self.START - DAY, period)
        assert commissioning_date_matches(self.START + 364 * DAY, period)
        assert not commissioning_date_matches(self.START + 366 * DAY, period)

    def test_exactly_one_year_still_matches(self):
        period = DateRange(self.START)
        assert not is_stale_open_ended(self.START + 365 * DAY, period)
        assert commissioning_date_matches(self.START + 365 * DAY, period)

    def test_closed_ranges_never_expire(self):
        period = DateRange(date(2000, 1, 1), date(2010, 12, 31))
        assert not is_stale_open_ended(date(2010, 12, 31), period)
        assert commissioning_date_matches(date(2010, 12, 31), period)

    def test_raw_predicate_ignores_staleness(self):
        period = DateRange(self.START)
        assert date_in_range(self.START + 366 * DAY, period)
