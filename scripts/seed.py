"""Seed a development database with a manager, an employee and a timesheet.

Usage:
    python -m scripts.seed [--database-url URL] [--create-schema]

Prints the IDs it created so they can be used as X-User-ID values.
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal

from hr_payroll.config import configure_logging, get_settings
from hr_payroll.database import create_schema, get_engine, make_session_factory
from hr_payroll.models import UserRole
from hr_payroll.services import (
    EmployeeService,
    NewEmployee,
    NewTimesheet,
    NewUser,
    TimesheetService,
)
from hr_payroll.sin import SINCipher, SINVault

DEMO_SIN = "046454286"


async def seed(database_url: str, with_schema: bool) -> None:
    """Insert demo rows through the services."""
    settings = get_settings()
    cipher = SINCipher.from_settings(settings)

    engine = get_engine(database_url)
    try:
        if with_schema:
            await create_schema(engine)

        factory = make_session_factory(engine)
        async with factory() as session:
            employees = EmployeeService(session)

            employee = await employees.create_employee(
                NewEmployee(
                    first_name="Jane",
                    last_name="Doe",
                    email="jane.doe@example.com",
                    pay_rate=Decimal("25.00"),
                    start_date=date(2024, 1, 8),
                    address="100 Queen St W, Toronto, ON",
                )
            )
            manager = await employees.create_user(
                NewUser(
                    email="manager@example.com",
                    first_name="Morgan",
                    last_name="Lee",
                    role=UserRole.MANAGER,
                )
            )
            login = await employees.create_user(
                NewUser(
                    email="jane.doe@example.com",
                    first_name="Jane",
                    last_name="Doe",
                    employee_id=employee.employee_id,
                )
            )

            await SINVault(session, cipher).store(employee.employee_id, DEMO_SIN)

            await TimesheetService(session).create_timesheet(
                NewTimesheet(
                    employee_id=employee.employee_id,
                    start_time=datetime(2024, 3, 4, 9, tzinfo=timezone.utc),
                    end_time=datetime(2024, 3, 4, 19, tzinfo=timezone.utc),
                    regular_hours=Decimal("8"),
                    overtime_hours=Decimal("2"),
                )
            )

        print(f"Manager user:  {manager.user_id}")
        print(f"Employee user: {login.user_id}")
        print(f"Employee:      {employee.employee_id}")
    finally:
        await engine.dispose()


def main() -> None:
    """Main entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument(
        "--database-url",
        type=str,
        default=settings.database_url,
        help="Database URL (default: from settings)",
    )
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create tables before seeding",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)
    asyncio.run(seed(args.database_url, args.create_schema))


if __name__ == "__main__":
    main()
