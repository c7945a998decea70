"""Employee, user and SIN endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from hr_payroll.api.dependencies import ActingUserId, ClientIp, Employees, Manager, Vault
from hr_payroll.api.schemas import (
    AccessLogListResponse,
    AccessLogResponse,
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeResponse,
    ErrorResponse,
    SINCreate,
    SINPublicResponse,
    SINValueResponse,
    UserCreate,
    UserResponse,
)
from hr_payroll.models import SINAccessType
from hr_payroll.services import NewEmployee, NewUser
from hr_payroll.sin import AccessLogFilters

router = APIRouter(prefix="/employees", tags=["employees"])
users_router = APIRouter(prefix="/users", tags=["users"])
sin_router = APIRouter(prefix="/sin", tags=["sin"])


# ============================================================================
# Employees
# ============================================================================


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_employee(
    employees: Employees,
    _manager: Manager,
    payload: EmployeeCreate,
) -> EmployeeResponse:
    """Create a new employee."""
    employee = await employees.create_employee(NewEmployee(**payload.model_dump()))
    return EmployeeResponse.model_validate(employee)


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    employees: Employees,
    _manager: Manager,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> EmployeeListResponse:
    """List employees."""
    result = await employees.list_employees(page=page, limit=limit)
    return EmployeeListResponse(
        data=[EmployeeResponse.model_validate(e) for e in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    employees: Employees,
    _manager: Manager,
    employee_id: Annotated[UUID, Path()],
) -> EmployeeResponse:
    """Get a specific employee by ID."""
    return EmployeeResponse.model_validate(await employees.get_employee(employee_id))


# ============================================================================
# SIN vault
# ============================================================================


@router.post(
    "/{employee_id}/sin",
    response_model=SINPublicResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def store_sin(
    vault: Vault,
    _manager: Manager,
    employee_id: Annotated[UUID, Path()],
    payload: SINCreate,
) -> SINPublicResponse:
    """Encrypt and store an employee's SIN."""
    view = await vault.store(employee_id, payload.sin_number)
    return SINPublicResponse.model_validate(view)


@router.get(
    "/{employee_id}/sin",
    response_model=SINValueResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def retrieve_sin(
    vault: Vault,
    user_id: ActingUserId,
    client_ip: ClientIp,
    employee_id: Annotated[UUID, Path()],
    access_type: SINAccessType = SINAccessType.STANDARD_VIEW,
) -> SINValueResponse:
    """Read an employee's SIN, masked unless a manager asks for a privileged view."""
    value = await vault.retrieve(user_id, employee_id, access_type, client_ip)
    return SINValueResponse(employee_id=employee_id, access_type=access_type, sin=value)


@sin_router.get("/access-logs", response_model=AccessLogListResponse)
async def list_access_logs(
    vault: Vault,
    _manager: Manager,
    employee_id: UUID | None = None,
    user_id: UUID | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> AccessLogListResponse:
    """Audit trail of SIN reads."""
    result = await vault.list_access_logs(
        AccessLogFilters(
            employee_id=employee_id,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )
    )
    return AccessLogListResponse(
        data=[AccessLogResponse.model_validate(entry) for entry in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


# ============================================================================
# Users
# ============================================================================


@users_router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_user(
    employees: Employees,
    _manager: Manager,
    payload: UserCreate,
) -> UserResponse:
    """Create a login, optionally linked to an employee."""
    user = await employees.create_user(NewUser(**payload.model_dump()))
    return UserResponse.model_validate(user)
