"""Tests for half-month pay period boundaries."""

import calendar
from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from hr_payroll.calculators import day_end, day_start, resolve_period_bounds
from hr_payroll.errors import ValidationError

UTC = timezone.utc


class TestResolvePeriodBounds:
    def test_first_half(self):
        bounds = resolve_period_bounds(2024, 3, is_first_half=True)

        assert bounds.start_date == datetime(2024, 3, 1, tzinfo=UTC)
        assert bounds.end_date == datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=UTC)

    def test_second_half_leap_february(self):
        bounds = resolve_period_bounds(2024, 2, is_first_half=False)

        assert bounds.start_date == datetime(2024, 2, 16, tzinfo=UTC)
        assert bounds.end_date == datetime(2024, 2, 29, 23, 59, 59, 999000, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("year", "month", "last_day"),
        [(2023, 2, 28), (2024, 4, 30), (2024, 12, 31), (2000, 2, 29), (1900, 2, 28)],
    )
    def test_second_half_ends_on_last_day(self, year, month, last_day):
        bounds = resolve_period_bounds(year, month, is_first_half=False)
        assert bounds.end_date.date() == date(year, month, last_day)

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, month):
        with pytest.raises(ValidationError, match="Month"):
            resolve_period_bounds(2024, month, is_first_half=True)

    def test_invalid_year(self):
        with pytest.raises(ValidationError, match="Year"):
            resolve_period_bounds(0, 1, is_first_half=True)

    def test_contains_is_inclusive(self):
        bounds = resolve_period_bounds(2024, 3, is_first_half=True)

        assert bounds.contains(bounds.start_date)
        assert bounds.contains(bounds.end_date)
        assert not bounds.contains(bounds.end_date + timedelta(milliseconds=1))
        assert not bounds.contains(bounds.start_date - timedelta(microseconds=1))

    @given(year=st.integers(1, 9999), month=st.integers(1, 12))
    def test_halves_tile_the_month(self, year, month):
        first = resolve_period_bounds(year, month, is_first_half=True)
        second = resolve_period_bounds(year, month, is_first_half=False)

        assert first.start_date.day == 1
        assert first.start_date.tzinfo == UTC
        assert second.start_date - first.end_date == timedelta(milliseconds=1)
        assert second.end_date.day == calendar.monthrange(year, month)[1]
        assert first.start_date < first.end_date < second.start_date < second.end_date


class TestDayBounds:
    def test_date_input(self):
        assert day_start(date(2024, 3, 4)) == datetime(2024, 3, 4, tzinfo=UTC)
        assert day_end(date(2024, 3, 4)) == datetime(
            2024, 3, 4, 23, 59, 59, 999000, tzinfo=UTC
        )

    def test_aware_datetime_uses_utc_day(self):
        # 20:00 at UTC-05:00 is 01:00 the next day in UTC
        value = datetime(2024, 3, 4, 20, tzinfo=timezone(timedelta(hours=-5)))
        assert day_start(value) == datetime(2024, 3, 5, tzinfo=UTC)
