"""Timesheet endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from hr_payroll.api.dependencies import Manager, Timesheets
from hr_payroll.api.schemas import (
    ErrorResponse,
    TimesheetCreate,
    TimesheetListResponse,
    TimesheetResponse,
)
from hr_payroll.services import NewTimesheet, TimesheetFilters

router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@router.post(
    "",
    response_model=TimesheetResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_timesheet(
    timesheets: Timesheets,
    _manager: Manager,
    payload: TimesheetCreate,
) -> TimesheetResponse:
    """Record worked time; totals use the employee's current pay rate."""
    timesheet = await timesheets.create_timesheet(NewTimesheet(**payload.model_dump()))
    return TimesheetResponse.model_validate(timesheet)


@router.get("", response_model=TimesheetListResponse)
async def list_timesheets(
    timesheets: Timesheets,
    _manager: Manager,
    employee_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> TimesheetListResponse:
    result = await timesheets.list_timesheets(
        TimesheetFilters(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )
    )
    return TimesheetListResponse(
        data=[TimesheetResponse.model_validate(t) for t in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get(
    "/{timesheet_id}",
    response_model=TimesheetResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_timesheet(
    timesheets: Timesheets,
    _manager: Manager,
    timesheet_id: Annotated[UUID, Path()],
) -> TimesheetResponse:
    return TimesheetResponse.model_validate(await timesheets.get_timesheet(timesheet_id))


@router.delete(
    "/{timesheet_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_timesheet(
    timesheets: Timesheets,
    _manager: Manager,
    timesheet_id: Annotated[UUID, Path()],
) -> Response:
    await timesheets.delete_timesheet(timesheet_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
