"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.database import get_session
from hr_payroll.errors import ForbiddenError
from hr_payroll.models import User
from hr_payroll.services import EmployeeService, PayrollService, TimesheetService
from hr_payroll.sin import SINCipher, SINVault


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_session() as session:
        yield session


def get_cipher(request: Request) -> SINCipher:
    """The process-wide cipher built when the app was created."""
    return request.app.state.sin_cipher


async def get_acting_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> UUID:
    """Extract the acting user's ID from header."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID header is required",
        )
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-User-ID format",
        )


def get_client_ip(request: Request) -> str | None:
    """Source address recorded in the SIN access log."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
ActingUserId = Annotated[UUID, Depends(get_acting_user_id)]
ClientIp = Annotated[str | None, Depends(get_client_ip)]
Cipher = Annotated[SINCipher, Depends(get_cipher)]


def get_vault(db: DbSession, cipher: Cipher) -> SINVault:
    return SINVault(db, cipher)


def get_payroll_service(db: DbSession) -> PayrollService:
    return PayrollService(db)


def get_employee_service(db: DbSession) -> EmployeeService:
    return EmployeeService(db)


def get_timesheet_service(db: DbSession) -> TimesheetService:
    return TimesheetService(db)


Vault = Annotated[SINVault, Depends(get_vault)]
Payrolls = Annotated[PayrollService, Depends(get_payroll_service)]
Employees = Annotated[EmployeeService, Depends(get_employee_service)]
Timesheets = Annotated[TimesheetService, Depends(get_timesheet_service)]


async def require_manager(user_id: ActingUserId, employees: Employees) -> User:
    """Acting user, who must hold the manager role."""
    user = await employees.get_user(user_id)
    if not user.is_active or not user.is_manager:
        raise ForbiddenError("Manager role required")
    return user


Manager = Annotated[User, Depends(require_manager)]
