"""Pay period and payroll API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from hr_payroll.api.dependencies import Manager, Payrolls
from hr_payroll.api.schemas import (
    CalculationResponse,
    ErrorResponse,
    PayPeriodCreate,
    PayPeriodListResponse,
    PayPeriodResponse,
    PayrollListResponse,
    PayrollResponse,
    PayrollStatusUpdate,
)
from hr_payroll.models import PayPeriodStatus, PayPeriodType, PayrollStatus
from hr_payroll.services import PayPeriodFilters, PayrollFilters

router = APIRouter(prefix="/pay-periods", tags=["pay-periods"])
payrolls_router = APIRouter(prefix="/payrolls", tags=["payrolls"])


# ============================================================================
# Pay Periods
# ============================================================================


@router.post(
    "",
    response_model=PayPeriodResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}},
)
async def get_or_create_pay_period(
    payroll: Payrolls,
    _manager: Manager,
    payload: PayPeriodCreate,
) -> PayPeriodResponse:
    """Find or open the pay period for a half month."""
    period = await payroll.get_or_create_pay_period(
        payload.period_type,
        payload.year,
        payload.month,
        force_recalculate=payload.force_recalculate,
    )
    return PayPeriodResponse.model_validate(period)


@router.get(
    "",
    response_model=PayPeriodListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_pay_periods(
    payroll: Payrolls,
    _manager: Manager,
    start_date: date | None = None,
    end_date: date | None = None,
    status_filter: Annotated[PayPeriodStatus | None, Query(alias="status")] = None,
    period_type: PayPeriodType | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> PayPeriodListResponse:
    """List pay periods with optional filters, newest first."""
    result = await payroll.list_pay_periods(
        PayPeriodFilters(
            start_date=start_date,
            end_date=end_date,
            status=status_filter,
            period_type=period_type,
            page=page,
            limit=limit,
        )
    )
    return PayPeriodListResponse(
        data=[PayPeriodResponse.model_validate(p) for p in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get(
    "/{pay_period_id}",
    response_model=PayPeriodResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_pay_period(
    payroll: Payrolls,
    _manager: Manager,
    pay_period_id: Annotated[UUID, Path()],
) -> PayPeriodResponse:
    """Get a specific pay period by ID."""
    return PayPeriodResponse.model_validate(await payroll.get_pay_period_by_id(pay_period_id))


# ============================================================================
# Pay Period State Transitions
# ============================================================================


@router.post(
    "/{pay_period_id}/calculate",
    response_model=CalculationResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def calculate_pay_period(
    payroll: Payrolls,
    _manager: Manager,
    pay_period_id: Annotated[UUID, Path()],
) -> CalculationResponse:
    """Aggregate the period's timesheets into DRAFT payrolls."""
    created = await payroll.calculate_period_payroll(pay_period_id)
    return CalculationResponse(
        pay_period_id=pay_period_id,
        payrolls=[PayrollResponse.model_validate(p) for p in created],
    )


@router.post(
    "/{pay_period_id}/complete",
    response_model=PayPeriodResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def complete_pay_period(
    payroll: Payrolls,
    _manager: Manager,
    pay_period_id: Annotated[UUID, Path()],
) -> PayPeriodResponse:
    """Mark a pay period COMPLETED."""
    return PayPeriodResponse.model_validate(await payroll.complete_pay_period(pay_period_id))


# ============================================================================
# Payrolls
# ============================================================================


@payrolls_router.get("", response_model=PayrollListResponse)
async def list_payrolls(
    payroll: Payrolls,
    _manager: Manager,
    employee_id: UUID | None = None,
    pay_period_id: UUID | None = None,
    status_filter: Annotated[PayrollStatus | None, Query(alias="status")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> PayrollListResponse:
    result = await payroll.list_payrolls(
        PayrollFilters(
            employee_id=employee_id,
            pay_period_id=pay_period_id,
            status=status_filter,
            page=page,
            limit=limit,
        )
    )
    return PayrollListResponse(
        data=[PayrollResponse.model_validate(p) for p in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@payrolls_router.patch(
    "/{payroll_id}/status",
    response_model=PayrollResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_payroll_status(
    payroll: Payrolls,
    _manager: Manager,
    payroll_id: Annotated[UUID, Path()],
    payload: PayrollStatusUpdate,
) -> PayrollResponse:
    return PayrollResponse.model_validate(
        await payroll.update_payroll_status(payroll_id, payload.status)
    )
