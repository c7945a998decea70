"""SQLAlchemy ORM models."""

from hr_payroll.models.base import Base, TimestampMixin, utcnow
from hr_payroll.models.employee import Employee, User, UserRole
from hr_payroll.models.payroll import (
    PayPeriod,
    PayPeriodStatus,
    PayPeriodType,
    Payroll,
    PayrollStatus,
    Timesheet,
)
from hr_payroll.models.sin import EmployeeSIN, SINAccessLevel, SINAccessLog, SINAccessType

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    # Employees
    "Employee",
    "User",
    "UserRole",
    # SIN vault
    "EmployeeSIN",
    "SINAccessLevel",
    "SINAccessLog",
    "SINAccessType",
    # Payroll
    "PayPeriod",
    "PayPeriodStatus",
    "PayPeriodType",
    "Payroll",
    "PayrollStatus",
    "Timesheet",
]
