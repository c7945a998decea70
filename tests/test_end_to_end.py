"""End-to-end scenario through the services: employee, SIN, timesheet, payroll."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal

from hr_payroll.models import PayPeriodType, SINAccessType, UserRole
from hr_payroll.services import (
    EmployeeService,
    NewEmployee,
    NewTimesheet,
    NewUser,
    PayrollFilters,
    PayrollService,
    TimesheetService,
)
from hr_payroll.sin import SINVault

MASKED = re.compile(r"^XXX-XXX-\d{3}$")


async def test_employee_to_payroll(session, cipher):
    employees = EmployeeService(session)
    employee = await employees.create_employee(
        NewEmployee(
            first_name="Priya",
            last_name="Singh",
            email="priya@example.com",
            pay_rate=Decimal("27.40"),
            start_date=date(2023, 6, 1),
        )
    )
    manager = await employees.create_user(
        NewUser(
            email="boss@example.com",
            first_name="Morgan",
            last_name="Lee",
            role=UserRole.MANAGER,
        )
    )

    vault = SINVault(session, cipher)
    view = await vault.store(employee.employee_id, "046454286")
    assert view.last3 == "286"

    masked = await vault.retrieve(
        manager.user_id, employee.employee_id, SINAccessType.STANDARD_VIEW, "127.0.0.1"
    )
    assert MASKED.match(masked)
    assert masked.endswith("286")

    await TimesheetService(session).create_timesheet(
        NewTimesheet(
            employee_id=employee.employee_id,
            start_time=datetime(2024, 3, 7, 9, tzinfo=timezone.utc),
            end_time=datetime(2024, 3, 7, 17, tzinfo=timezone.utc),
            regular_hours=Decimal("8"),
        )
    )

    payroll = PayrollService(session)
    period = await payroll.get_or_create_pay_period(PayPeriodType.FIRST_HALF, 2024, 3)
    await payroll.calculate_period_payroll(period.pay_period_id)

    page = await payroll.list_payrolls(PayrollFilters(pay_period_id=period.pay_period_id))
    assert page.total == 1
    assert page.data[0].gross_pay == Decimal("8") * Decimal("27.40")
