"""Payroll and HR services."""

from hr_payroll.services.employee_service import EmployeeService, NewEmployee, NewUser
from hr_payroll.services.payroll_service import PayPeriodFilters, PayrollFilters, PayrollService
from hr_payroll.services.state_machine import (
    InvalidTransitionError,
    PayPeriodStateMachine,
    PayrollStateMachine,
)
from hr_payroll.services.timesheet_service import NewTimesheet, TimesheetFilters, TimesheetService

__all__ = [
    "EmployeeService",
    "InvalidTransitionError",
    "NewEmployee",
    "NewTimesheet",
    "NewUser",
    "PayPeriodFilters",
    "PayPeriodStateMachine",
    "PayrollFilters",
    "PayrollService",
    "PayrollStateMachine",
    "TimesheetFilters",
    "TimesheetService",
]
