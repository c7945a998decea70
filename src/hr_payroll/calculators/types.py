"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class TimeRecordInput:
    """Hours from one timesheet, as read for aggregation."""

    employee_id: UUID
    regular_hours: Decimal
    overtime_hours: Decimal
    pay_rate: Decimal  # employee's current rate, not the rate at entry time


@dataclass(frozen=True)
class PayrollTotals:
    """Aggregated hours and gross pay for one employee."""

    employee_id: UUID
    total_regular_hours: Decimal
    total_overtime_hours: Decimal
    total_hours: Decimal
    gross_pay: Decimal
    record_count: int
