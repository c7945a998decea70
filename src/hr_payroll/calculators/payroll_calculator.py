"""Gross pay arithmetic shared by timesheets and period payroll."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from hr_payroll.calculators.types import PayrollTotals, TimeRecordInput

OVERTIME_MULTIPLIER = Decimal("1.5")
CENTS = Decimal("0.01")


def quantize(amount: Decimal) -> Decimal:
    """Round to cents, half up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def weighted_hours(regular_hours: Decimal, overtime_hours: Decimal) -> Decimal:
    """Regular hours plus overtime at the 1.5x premium."""
    return Decimal(regular_hours) + Decimal(overtime_hours) * OVERTIME_MULTIPLIER


def gross_pay(total_hours: Decimal, pay_rate: Decimal) -> Decimal:
    return quantize(Decimal(total_hours) * Decimal(pay_rate))


def group_by_employee(
    records: Iterable[TimeRecordInput],
) -> dict[UUID, list[TimeRecordInput]]:
    """Group records by employee, keeping first-seen order."""
    groups: dict[UUID, list[TimeRecordInput]] = {}
    for record in records:
        groups.setdefault(record.employee_id, []).append(record)
    return groups


def calculate_totals(records: list[TimeRecordInput]) -> PayrollTotals:
    """Sum one employee's records into payroll totals.

    total_hours bakes in the overtime premium; gross pay uses the rate
    carried on the records, which is the employee's current rate.
    """
    if not records:
        raise ValueError("Cannot calculate totals for an empty group")

    employee_id = records[0].employee_id
    if any(r.employee_id != employee_id for r in records):
        raise ValueError("All records in a group must belong to one employee")

    regular = sum((Decimal(r.regular_hours) for r in records), Decimal("0"))
    overtime = sum((Decimal(r.overtime_hours) for r in records), Decimal("0"))
    total_hours = weighted_hours(regular, overtime)

    return PayrollTotals(
        employee_id=employee_id,
        total_regular_hours=quantize(regular),
        total_overtime_hours=quantize(overtime),
        total_hours=quantize(total_hours),
        gross_pay=gross_pay(total_hours, records[0].pay_rate),
        record_count=len(records),
    )
