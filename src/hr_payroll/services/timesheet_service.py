"""Timesheet input - the time records payroll is aggregated from."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.calculators import day_end, day_start, gross_pay, quantize, weighted_hours
from hr_payroll.errors import DatabaseError, NotFoundError, ValidationError
from hr_payroll.models import Employee, Timesheet
from hr_payroll.types import Page, validate_pagination

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewTimesheet:
    employee_id: UUID
    start_time: datetime
    end_time: datetime
    regular_hours: Decimal
    overtime_hours: Decimal = Decimal("0")


@dataclass(frozen=True)
class TimesheetFilters:
    employee_id: UUID | None = None
    start_date: date | datetime | None = None
    end_date: date | datetime | None = None
    page: int = 1
    limit: int = 10


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimesheetService:
    """Create and query timesheets; totals use the employee's current rate."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_timesheet(self, data: NewTimesheet) -> Timesheet:
        regular = Decimal(data.regular_hours)
        overtime = Decimal(data.overtime_hours)
        if regular <= 0:
            raise ValidationError("Regular hours must be greater than 0")
        if overtime < 0:
            raise ValidationError("Overtime hours cannot be negative")

        start_time, end_time = _to_utc(data.start_time), _to_utc(data.end_time)
        if end_time <= start_time:
            raise ValidationError("End time must be after start time")

        try:
            employee = await self.session.get(Employee, data.employee_id)
            if employee is None:
                raise NotFoundError("Employee")

            total_hours = weighted_hours(regular, overtime)
            timesheet = Timesheet(
                employee_id=data.employee_id,
                start_time=start_time,
                end_time=end_time,
                regular_hours=quantize(regular),
                overtime_hours=quantize(overtime),
                total_hours=quantize(total_hours),
                total_pay=gross_pay(total_hours, employee.pay_rate),
            )
            self.session.add(timesheet)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Database error while creating timesheet")
            raise DatabaseError("Database error while creating timesheet") from exc
        return timesheet

    async def get_timesheet(self, timesheet_id: UUID) -> Timesheet:
        try:
            timesheet = await self.session.get(Timesheet, timesheet_id)
        except SQLAlchemyError as exc:
            logger.exception("Database error while fetching timesheet")
            raise DatabaseError("Database error while fetching timesheet") from exc
        if timesheet is None:
            raise NotFoundError(f"Timesheet with ID {timesheet_id}")
        return timesheet

    async def delete_timesheet(self, timesheet_id: UUID) -> None:
        await self.get_timesheet(timesheet_id)
        try:
            await self.session.execute(
                delete(Timesheet).where(Timesheet.timesheet_id == timesheet_id)
            )
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Database error while deleting timesheet")
            raise DatabaseError("Database error while deleting timesheet") from exc

    async def list_timesheets(self, filters: TimesheetFilters) -> Page[Timesheet]:
        validate_pagination(filters.page, filters.limit)

        query = select(Timesheet)
        if filters.employee_id is not None:
            query = query.where(Timesheet.employee_id == filters.employee_id)
        if filters.start_date is not None:
            query = query.where(Timesheet.start_time >= day_start(filters.start_date))
        if filters.end_date is not None:
            query = query.where(Timesheet.start_time <= day_end(filters.end_date))

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(query.subquery())
            ) or 0
            result = await self.session.execute(
                query.order_by(Timesheet.start_time.desc())
                .offset((filters.page - 1) * filters.limit)
                .limit(filters.limit)
            )
        except SQLAlchemyError as exc:
            logger.exception("Database error while fetching timesheets")
            raise DatabaseError("Database error while fetching timesheets") from exc

        return Page(
            data=list(result.scalars().all()),
            total=total,
            page=filters.page,
            limit=filters.limit,
        )
