"""Tests for employee, user and timesheet services."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from hr_payroll.errors import NotFoundError, ValidationError
from hr_payroll.models import UserRole
from hr_payroll.services import (
    EmployeeService,
    NewEmployee,
    NewTimesheet,
    NewUser,
    TimesheetFilters,
    TimesheetService,
)

UTC = timezone.utc


def new_employee(**overrides) -> NewEmployee:
    fields = dict(
        first_name="Sam",
        last_name="Tremblay",
        email="sam@example.com",
        pay_rate=Decimal("22.50"),
        start_date=date(2023, 9, 1),
    )
    fields.update(overrides)
    return NewEmployee(**fields)


class TestEmployeeService:
    async def test_create_and_get(self, session):
        service = EmployeeService(session)
        created = await service.create_employee(new_employee())

        fetched = await service.get_employee(created.employee_id)
        assert fetched.full_name == "Sam Tremblay"
        assert fetched.pay_rate == Decimal("22.50")

    @pytest.mark.parametrize("rate", ["0", "-1.00"])
    async def test_pay_rate_must_be_positive(self, session, rate):
        with pytest.raises(ValidationError, match="Pay rate"):
            await EmployeeService(session).create_employee(new_employee(pay_rate=Decimal(rate)))

    async def test_duplicate_email(self, session):
        service = EmployeeService(session)
        await service.create_employee(new_employee())

        with pytest.raises(ValidationError, match="email already exists"):
            await service.create_employee(new_employee(first_name="Other"))

    async def test_get_missing(self, session):
        with pytest.raises(NotFoundError, match="Employee not found"):
            await EmployeeService(session).get_employee(uuid4())

    async def test_list_is_paginated(self, session):
        service = EmployeeService(session)
        for i in range(3):
            await service.create_employee(new_employee(email=f"e{i}@example.com"))

        page = await service.list_employees(page=1, limit=2)
        assert page.total == 3
        assert len(page.data) == 2

    async def test_create_user_linked_to_employee(self, session, employee):
        user = await EmployeeService(session).create_user(
            NewUser(
                email="login@example.com",
                first_name="Jane",
                last_name="Doe",
                employee_id=employee.employee_id,
            )
        )
        assert user.role == UserRole.EMPLOYEE.value
        assert user.is_manager is False
        assert user.employee_id == employee.employee_id

    async def test_create_user_unknown_employee(self, session):
        with pytest.raises(NotFoundError):
            await EmployeeService(session).create_user(
                NewUser(email="x@example.com", first_name="X", last_name="Y", employee_id=uuid4())
            )

    async def test_create_user_invalid_role(self, session):
        with pytest.raises(ValidationError, match="Invalid role"):
            await EmployeeService(session).create_user(
                NewUser(email="x@example.com", first_name="X", last_name="Y", role="ADMIN")
            )


class TestTimesheetService:
    def _new(self, employee, start=None, regular="8", overtime="0", minutes=480):
        start = start or datetime(2024, 3, 4, 9, tzinfo=UTC)
        return NewTimesheet(
            employee_id=employee.employee_id,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            regular_hours=Decimal(regular),
            overtime_hours=Decimal(overtime),
        )

    async def test_totals_use_overtime_premium(self, session, employee):
        timesheet = await TimesheetService(session).create_timesheet(
            self._new(employee, regular="8", overtime="2", minutes=600)
        )

        assert timesheet.total_hours == Decimal("11.00")
        assert timesheet.total_pay == Decimal("275.00")

    async def test_naive_times_are_treated_as_utc(self, session, employee):
        timesheet = await TimesheetService(session).create_timesheet(
            self._new(employee, start=datetime(2024, 3, 4, 9))
        )
        assert timesheet.start_time == datetime(2024, 3, 4, 9, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("regular", "overtime", "minutes", "message"),
        [
            ("0", "0", 60, "Regular hours"),
            ("8", "-1", 60, "Overtime"),
            ("8", "0", 0, "End time"),
            ("8", "0", -30, "End time"),
        ],
    )
    async def test_validation(self, session, employee, regular, overtime, minutes, message):
        with pytest.raises(ValidationError, match=message):
            await TimesheetService(session).create_timesheet(
                self._new(employee, regular=regular, overtime=overtime, minutes=minutes)
            )

    async def test_unknown_employee(self, session):
        data = NewTimesheet(
            employee_id=uuid4(),
            start_time=datetime(2024, 3, 4, 9, tzinfo=UTC),
            end_time=datetime(2024, 3, 4, 17, tzinfo=UTC),
            regular_hours=Decimal("8"),
        )
        with pytest.raises(NotFoundError, match="Employee"):
            await TimesheetService(session).create_timesheet(data)

    async def test_delete(self, session, employee):
        service = TimesheetService(session)
        timesheet = await service.create_timesheet(self._new(employee))

        await service.delete_timesheet(timesheet.timesheet_id)

        with pytest.raises(NotFoundError, match="Timesheet with ID"):
            await service.get_timesheet(timesheet.timesheet_id)

    async def test_list_by_date_range(self, session, employee):
        service = TimesheetService(session)
        for day in (1, 10, 20):
            await service.create_timesheet(
                self._new(employee, start=datetime(2024, 3, day, 9, tzinfo=UTC))
            )

        page = await service.list_timesheets(
            TimesheetFilters(
                employee_id=employee.employee_id,
                start_date=date(2024, 3, 1),
                end_date=date(2024, 3, 15),
            )
        )
        assert page.total == 2
        assert page.data[0].start_time.day == 10
