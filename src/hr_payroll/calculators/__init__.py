"""Payroll calculators: period bounds and gross pay arithmetic."""

from hr_payroll.calculators.payroll_calculator import (
    OVERTIME_MULTIPLIER,
    calculate_totals,
    gross_pay,
    group_by_employee,
    quantize,
    weighted_hours,
)
from hr_payroll.calculators.periods import PeriodBounds, day_end, day_start, resolve_period_bounds
from hr_payroll.calculators.types import PayrollTotals, TimeRecordInput

__all__ = [
    "OVERTIME_MULTIPLIER",
    "PayrollTotals",
    "PeriodBounds",
    "TimeRecordInput",
    "calculate_totals",
    "day_end",
    "day_start",
    "gross_pay",
    "group_by_employee",
    "quantize",
    "resolve_period_bounds",
    "weighted_hours",
]
