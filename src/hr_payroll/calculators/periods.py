"""Half-month pay period boundaries, always in UTC."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timezone

from hr_payroll.errors import ValidationError

FIRST_HALF_LAST_DAY = 15

# Inclusive end of day, millisecond precision
END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class PeriodBounds:
    """Inclusive [start_date, end_date] range of a pay period."""

    start_date: datetime
    end_date: datetime

    def contains(self, value: datetime) -> bool:
        return self.start_date <= value <= self.end_date


def _utc(day: date, at: time) -> datetime:
    return datetime.combine(day, at, tzinfo=timezone.utc)


def resolve_period_bounds(year: int, month: int, is_first_half: bool) -> PeriodBounds:
    """Resolve a (year, month, half) triple to exact UTC boundaries.

    First half runs from day 1 00:00:00.000 to day 15 23:59:59.999; second
    half from day 16 00:00:00.000 to the last day of the month
    23:59:59.999, honouring month length and leap years.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Year out of range: {year}")

    if is_first_half:
        first_day, last_day = 1, FIRST_HALF_LAST_DAY
    else:
        first_day = FIRST_HALF_LAST_DAY + 1
        last_day = calendar.monthrange(year, month)[1]

    return PeriodBounds(
        start_date=_utc(date(year, month, first_day), time.min),
        end_date=_utc(date(year, month, last_day), END_OF_DAY),
    )


def _utc_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def day_start(value: date | datetime) -> datetime:
    """00:00:00.000 UTC on the value's UTC calendar day."""
    return _utc(_utc_date(value), time.min)


def day_end(value: date | datetime) -> datetime:
    """23:59:59.999 UTC on the value's UTC calendar day."""
    return _utc(_utc_date(value), END_OF_DAY)
