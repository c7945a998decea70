"""Pay period, payroll and timesheet models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from hr_payroll.models.employee import Employee


class PayPeriodType(str, Enum):
    """Half-month period buckets."""

    FIRST_HALF = "FIRST_HALF"  # 1 - 15
    SECOND_HALF = "SECOND_HALF"  # 16 - end of month


class PayPeriodStatus(str, Enum):
    """Pay period lifecycle states."""

    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"


class PayrollStatus(str, Enum):
    """Per-employee payroll states."""

    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    SENT = "SENT"
    COMPLETED = "COMPLETED"


# ===== Pay Periods =====


class PayPeriod(Base, TimestampMixin):
    """Half-month pay period."""

    __tablename__ = "pay_period"

    pay_period_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    period_type: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=PayPeriodStatus.PROCESSING.value
    )
    calculated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # No unique (start_date, period_type): forced recalculation adds rows.
    __table_args__ = (
        Index("pay_period_start_type_idx", "start_date", "period_type"),
        CheckConstraint(
            "period_type IN ('FIRST_HALF', 'SECOND_HALF')",
            name="pay_period_type_check",
        ),
        CheckConstraint(
            "status IN ('PROCESSING', 'COMPLETED')",
            name="pay_period_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="pay_period_dates_check"),
    )

    # Relationships
    payrolls: Mapped[list[Payroll]] = relationship(back_populates="pay_period")


# ===== Payroll =====


class Payroll(Base, TimestampMixin):
    """Aggregated pay for one employee in one pay period."""

    __tablename__ = "payroll"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pay_period_id: Mapped[UUID] = mapped_column(
        ForeignKey("pay_period.pay_period_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    total_regular_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_overtime_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=PayrollStatus.DRAFT.value
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT', 'CONFIRMED', 'SENT', 'COMPLETED')",
            name="payroll_status_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="payrolls")
    pay_period: Mapped[PayPeriod] = relationship(back_populates="payrolls")


# ===== Time Input =====


class Timesheet(Base, TimestampMixin):
    """Worked-time record for one shift."""

    __tablename__ = "timesheet"

    timesheet_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    regular_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    total_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    total_pay: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        Index("timesheet_start_time_idx", "start_time"),
        CheckConstraint("regular_hours > 0", name="timesheet_regular_hours_positive"),
        CheckConstraint("overtime_hours >= 0", name="timesheet_overtime_nonnegative"),
        CheckConstraint("end_time > start_time", name="timesheet_times_check"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="timesheets")
