"""Payroll service - pay period lifecycle and per-employee aggregation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_payroll.calculators import (
    TimeRecordInput,
    calculate_totals,
    day_end,
    day_start,
    group_by_employee,
    resolve_period_bounds,
)
from hr_payroll.errors import DatabaseError, NotFoundError, ValidationError
from hr_payroll.models import (
    Employee,
    PayPeriod,
    PayPeriodStatus,
    PayPeriodType,
    Payroll,
    PayrollStatus,
    Timesheet,
    utcnow,
)
from hr_payroll.services.state_machine import PayPeriodStateMachine, PayrollStateMachine
from hr_payroll.types import Page, PayPeriodView, PayrollView, validate_pagination

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayPeriodFilters:
    """Filters for listing pay periods."""

    start_date: date | datetime | None = None
    end_date: date | datetime | None = None
    status: PayPeriodStatus | str | None = None
    period_type: PayPeriodType | str | None = None
    page: int = 1
    limit: int = 10


@dataclass(frozen=True)
class PayrollFilters:
    """Filters for listing payrolls."""

    employee_id: UUID | None = None
    pay_period_id: UUID | None = None
    status: PayrollStatus | str | None = None
    page: int = 1
    limit: int = 10


def _enum(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value}") from None


class PayrollService:
    """Service for pay periods and payroll aggregation.

    Operations:
    - get_or_create_pay_period: resolve a half-month and find or open its period
    - calculate_period_payroll: aggregate timesheets into DRAFT payrolls
    - complete_pay_period: PROCESSING → COMPLETED, irreversible
    - get_pay_period_by_id / list_pay_periods: reads
    - update_payroll_status / list_payrolls: per-employee payroll rows
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Pay periods
    # ------------------------------------------------------------------

    async def get_or_create_pay_period(
        self,
        period_type: PayPeriodType | str,
        year: int,
        month: int,
        force_recalculate: bool = False,
    ) -> PayPeriodView:
        """Return the period for (year, month, half), creating it if needed.

        With force_recalculate a new PROCESSING period with the same bounds
        is created even when one exists; the existing row is left in place.
        """
        period_type = _enum(PayPeriodType, period_type, "period type")
        bounds = resolve_period_bounds(
            year, month, is_first_half=period_type == PayPeriodType.FIRST_HALF
        )

        try:
            existing = await self.session.scalar(
                select(PayPeriod)
                .where(
                    PayPeriod.start_date.between(bounds.start_date, bounds.end_date),
                    PayPeriod.period_type == period_type.value,
                )
                .order_by(PayPeriod.created_at.desc())
                .limit(1)
                .options(selectinload(PayPeriod.payrolls))
                .execution_options(populate_existing=True)
            )
            if existing is not None and not force_recalculate:
                return PayPeriodView.from_model(existing)

            period = PayPeriod(
                start_date=bounds.start_date,
                end_date=bounds.end_date,
                period_type=period_type.value,
                status=PayPeriodStatus.PROCESSING.value,
                payrolls=[],
            )
            self.session.add(period)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Error processing pay period")
            raise DatabaseError("Error processing pay period") from exc

        if existing is not None:
            logger.warning(
                "Forced recalculation created pay period %s alongside %s (%s %d-%02d)",
                period.pay_period_id,
                existing.pay_period_id,
                period_type.value,
                year,
                month,
            )
        else:
            logger.info(
                "Created pay period %s (%s %d-%02d)",
                period.pay_period_id,
                period_type.value,
                year,
                month,
            )
        return PayPeriodView.from_model(period)

    async def get_pay_period_by_id(self, pay_period_id: UUID) -> PayPeriodView:
        """Load a pay period with its payrolls."""
        period = await self._get_period(pay_period_id)
        return PayPeriodView.from_model(period)

    async def calculate_period_payroll(self, pay_period_id: UUID) -> list[PayrollView]:
        """Aggregate the period's timesheets into one DRAFT payroll per employee.

        Each employee's payroll is committed on its own. A failing employee
        is rolled back and skipped; once every employee has been attempted
        the period's calculated_at is stamped, and a DatabaseError listing
        the failures is raised if there were any.

        Running this twice for the same period inserts a second set of rows.
        """
        period = await self._get_period(pay_period_id, load_payrolls=False)
        if not PayPeriodStateMachine.can_calculate(period.status):
            raise ValidationError(
                f"Cannot calculate payroll for {period.status} pay period",
                details={"pay_period_id": str(pay_period_id), "status": period.status},
            )

        try:
            result = await self.session.execute(
                select(
                    Timesheet.employee_id,
                    Timesheet.regular_hours,
                    Timesheet.overtime_hours,
                    Employee.pay_rate,
                )
                .join(Employee, Employee.employee_id == Timesheet.employee_id)
                .where(Timesheet.start_time.between(period.start_date, period.end_date))
                .order_by(Timesheet.start_time)
            )
        except SQLAlchemyError as exc:
            logger.exception("Error calculating period payroll")
            raise DatabaseError("Error calculating period payroll") from exc

        records = [
            TimeRecordInput(
                employee_id=row.employee_id,
                regular_hours=row.regular_hours,
                overtime_hours=row.overtime_hours,
                pay_rate=row.pay_rate,
            )
            for row in result
        ]

        created: list[PayrollView] = []
        failed: list[UUID] = []
        for employee_id, group in group_by_employee(records).items():
            totals = calculate_totals(group)
            payroll = Payroll(
                employee_id=employee_id,
                pay_period_id=pay_period_id,
                total_regular_hours=totals.total_regular_hours,
                total_overtime_hours=totals.total_overtime_hours,
                total_hours=totals.total_hours,
                gross_pay=totals.gross_pay,
                status=PayrollStatus.DRAFT.value,
            )
            try:
                self.session.add(payroll)
                await self.session.commit()
            except SQLAlchemyError:
                await self.session.rollback()
                logger.exception(
                    "Failed to save payroll for employee %s in period %s",
                    employee_id,
                    pay_period_id,
                )
                failed.append(employee_id)
                continue
            created.append(PayrollView.from_model(payroll))

        try:
            await self.session.execute(
                update(PayPeriod)
                .where(PayPeriod.pay_period_id == pay_period_id)
                .values(calculated_at=utcnow())
            )
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Error finalizing pay period")
            raise DatabaseError("Error finalizing pay period") from exc

        logger.info(
            "Calculated payroll for period %s: %d created, %d failed",
            pay_period_id,
            len(created),
            len(failed),
        )

        if failed:
            raise DatabaseError(
                f"Payroll calculation failed for {len(failed)} employee(s)",
                details={"employee_ids": [str(e) for e in failed]},
            )
        return created

    async def transition_status(
        self,
        pay_period_id: UUID,
        to_status: PayPeriodStatus | str,
    ) -> PayPeriodView:
        """Move a pay period to a new status.

        Raises InvalidTransitionError if the transition is not allowed.
        """
        period = await self._get_period(pay_period_id)
        PayPeriodStateMachine.validate_transition(period.status, to_status)

        to_value = to_status.value if isinstance(to_status, PayPeriodStatus) else to_status
        old_status = period.status
        period.status = to_value
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Error updating pay period status")
            raise DatabaseError("Error updating pay period status") from exc

        logger.info("Pay period %s: %s -> %s", pay_period_id, old_status, to_value)
        return PayPeriodView.from_model(period)

    async def complete_pay_period(self, pay_period_id: UUID) -> PayPeriodView:
        """Mark a pay period COMPLETED. There is no way back."""
        return await self.transition_status(pay_period_id, PayPeriodStatus.COMPLETED)

    async def list_pay_periods(self, filters: PayPeriodFilters) -> Page[PayPeriodView]:
        """List pay periods, newest start date first."""
        validate_pagination(filters.page, filters.limit)

        query = select(PayPeriod)
        if filters.start_date is not None:
            query = query.where(PayPeriod.start_date >= day_start(filters.start_date))
        if filters.end_date is not None:
            query = query.where(PayPeriod.end_date <= day_end(filters.end_date))
        if filters.status is not None:
            status = _enum(PayPeriodStatus, filters.status, "status")
            query = query.where(PayPeriod.status == status.value)
        if filters.period_type is not None:
            period_type = _enum(PayPeriodType, filters.period_type, "period type")
            query = query.where(PayPeriod.period_type == period_type.value)

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(query.subquery())
            ) or 0
            result = await self.session.execute(
                query.order_by(PayPeriod.start_date.desc(), PayPeriod.created_at.desc())
                .offset((filters.page - 1) * filters.limit)
                .limit(filters.limit)
                .options(selectinload(PayPeriod.payrolls))
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching pay periods")
            raise DatabaseError("Error fetching pay periods") from exc

        return Page(
            data=[PayPeriodView.from_model(p) for p in result.scalars().all()],
            total=total,
            page=filters.page,
            limit=filters.limit,
        )

    # ------------------------------------------------------------------
    # Payrolls
    # ------------------------------------------------------------------

    async def update_payroll_status(
        self,
        payroll_id: UUID,
        to_status: PayrollStatus | str,
    ) -> PayrollView:
        """Advance one payroll through DRAFT → CONFIRMED → SENT → COMPLETED."""
        try:
            payroll = await self.session.get(Payroll, payroll_id)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching payroll")
            raise DatabaseError("Error fetching payroll") from exc
        if payroll is None:
            raise NotFoundError("Payroll")

        PayrollStateMachine.validate_transition(payroll.status, to_status)
        payroll.status = to_status.value if isinstance(to_status, PayrollStatus) else to_status
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Error updating payroll status")
            raise DatabaseError("Error updating payroll status") from exc
        return PayrollView.from_model(payroll)

    async def list_payrolls(self, filters: PayrollFilters) -> Page[PayrollView]:
        """List payrolls, newest first."""
        validate_pagination(filters.page, filters.limit)

        query = select(Payroll)
        if filters.employee_id is not None:
            query = query.where(Payroll.employee_id == filters.employee_id)
        if filters.pay_period_id is not None:
            query = query.where(Payroll.pay_period_id == filters.pay_period_id)
        if filters.status is not None:
            status = _enum(PayrollStatus, filters.status, "status")
            query = query.where(Payroll.status == status.value)

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(query.subquery())
            ) or 0
            result = await self.session.execute(
                query.order_by(Payroll.created_at.desc())
                .offset((filters.page - 1) * filters.limit)
                .limit(filters.limit)
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching payrolls")
            raise DatabaseError("Error fetching payrolls") from exc

        return Page(
            data=[PayrollView.from_model(p) for p in result.scalars().all()],
            total=total,
            page=filters.page,
            limit=filters.limit,
        )

    async def _get_period(self, pay_period_id: UUID, load_payrolls: bool = True) -> PayPeriod:
        """Load a pay period, refreshing any copy already in the session."""
        query = (
            select(PayPeriod)
            .where(PayPeriod.pay_period_id == pay_period_id)
            .execution_options(populate_existing=True)
        )
        if load_payrolls:
            query = query.options(selectinload(PayPeriod.payrolls))

        try:
            period = await self.session.scalar(query)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching pay period")
            raise DatabaseError("Error fetching pay period") from exc
        if period is None:
            raise NotFoundError("PayPeriod")
        return period
