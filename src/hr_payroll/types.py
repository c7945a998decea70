"""Immutable transport records returned by the services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Generic, TypeVar
from uuid import UUID

from hr_payroll.errors import ValidationError

if TYPE_CHECKING:
    from hr_payroll.models import EmployeeSIN, PayPeriod, Payroll, SINAccessLog

T = TypeVar("T")

MAX_PAGE_SIZE = 100


def validate_pagination(page: int, limit: int) -> None:
    """Reject page numbers and sizes outside the supported range."""
    if page < 1:
        raise ValidationError("Page must be at least 1")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from the database."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a filtered listing."""

    data: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass(frozen=True)
class SINPublicView:
    """Non-sensitive view of a stored SIN: no ciphertext, IV, tag or hash."""

    sin_id: UUID
    employee_id: UUID
    last3: str
    access_level: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, record: EmployeeSIN) -> SINPublicView:
        return cls(
            sin_id=record.sin_id,
            employee_id=record.employee_id,
            last3=record.last3,
            access_level=record.access_level,
            created_at=as_utc(record.created_at),
            updated_at=as_utc(record.updated_at),
        )


@dataclass(frozen=True)
class AccessLogView:
    """Audit entry for a vault read."""

    access_log_id: UUID
    employee_id: UUID
    user_id: UUID
    access_type: str
    ip_address: str | None
    granted: bool
    accessed_at: datetime

    @classmethod
    def from_model(cls, entry: SINAccessLog) -> AccessLogView:
        return cls(
            access_log_id=entry.access_log_id,
            employee_id=entry.employee_id,
            user_id=entry.user_id,
            access_type=entry.access_type,
            ip_address=entry.ip_address,
            granted=entry.granted,
            accessed_at=as_utc(entry.accessed_at),
        )


@dataclass(frozen=True)
class PayrollView:
    """Per-employee payroll totals."""

    payroll_id: UUID
    employee_id: UUID
    pay_period_id: UUID
    total_regular_hours: Decimal
    total_overtime_hours: Decimal
    total_hours: Decimal
    gross_pay: Decimal
    status: str
    created_at: datetime

    @classmethod
    def from_model(cls, payroll: Payroll) -> PayrollView:
        return cls(
            payroll_id=payroll.payroll_id,
            employee_id=payroll.employee_id,
            pay_period_id=payroll.pay_period_id,
            total_regular_hours=payroll.total_regular_hours,
            total_overtime_hours=payroll.total_overtime_hours,
            total_hours=payroll.total_hours,
            gross_pay=payroll.gross_pay,
            status=payroll.status,
            created_at=as_utc(payroll.created_at),
        )


@dataclass(frozen=True)
class PayPeriodView:
    """Pay period with its payrolls."""

    pay_period_id: UUID
    start_date: datetime
    end_date: datetime
    period_type: str
    status: str
    calculated_at: datetime | None
    created_at: datetime
    payrolls: tuple[PayrollView, ...] = ()

    @classmethod
    def from_model(cls, period: PayPeriod, include_payrolls: bool = True) -> PayPeriodView:
        payrolls: tuple[PayrollView, ...] = ()
        if include_payrolls:
            payrolls = tuple(PayrollView.from_model(p) for p in period.payrolls)
        return cls(
            pay_period_id=period.pay_period_id,
            start_date=as_utc(period.start_date),
            end_date=as_utc(period.end_date),
            period_type=period.period_type,
            status=period.status,
            calculated_at=as_utc(period.calculated_at),
            created_at=as_utc(period.created_at),
            payrolls=payrolls,
        )
