"""Employee and user models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from hr_payroll.models.payroll import Payroll, Timesheet
    from hr_payroll.models.sin import EmployeeSIN


class UserRole(str, Enum):
    """Roles a login can hold."""

    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class Employee(Base, TimestampMixin):
    """Employee record."""

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    pay_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    resigned_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        CheckConstraint("pay_rate > 0", name="employee_pay_rate_positive"),
    )

    # Relationships
    sin: Mapped[EmployeeSIN | None] = relationship(
        back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    timesheets: Mapped[list[Timesheet]] = relationship(
        back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    payrolls: Mapped[list[Payroll]] = relationship(
        back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"


class User(Base, TimestampMixin):
    """Application login, optionally linked to an employee record."""

    __tablename__ = "app_user"

    user_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False, default=UserRole.EMPLOYEE.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    employee_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("role IN ('MANAGER', 'EMPLOYEE')", name="app_user_role_check"),
    )

    employee: Mapped[Employee | None] = relationship()

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER
