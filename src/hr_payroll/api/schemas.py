"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from hr_payroll.models import PayPeriodType, PayrollStatus, SINAccessType, UserRole


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=100)
    pay_rate: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    start_date: date
    address: str = ""
    date_of_birth: date | None = None


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    first_name: str
    last_name: str
    email: str
    address: str
    date_of_birth: date | None = None
    pay_rate: Decimal
    start_date: date
    resigned_date: date | None = None
    created_at: datetime


class EmployeeListResponse(BaseModel):
    data: list[EmployeeResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class UserCreate(BaseModel):
    """Schema for creating a login."""

    email: str = Field(min_length=3, max_length=100)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    role: UserRole = UserRole.EMPLOYEE
    employee_id: UUID | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    employee_id: UUID | None = None


# ============================================================================
# SIN schemas
# ============================================================================


class SINCreate(BaseModel):
    """Schema for storing an employee's SIN."""

    sin_number: str = Field(min_length=1, max_length=20)


class SINPublicResponse(BaseModel):
    """Stored SIN metadata. Never carries ciphertext or hashes."""

    model_config = ConfigDict(from_attributes=True)

    sin_id: UUID
    employee_id: UUID
    last3: str
    access_level: str
    created_at: datetime
    updated_at: datetime


class SINValueResponse(BaseModel):
    employee_id: UUID
    access_type: SINAccessType
    sin: str


class AccessLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    access_log_id: UUID
    employee_id: UUID
    user_id: UUID
    access_type: SINAccessType
    ip_address: str | None = None
    granted: bool
    accessed_at: datetime


class AccessLogListResponse(BaseModel):
    data: list[AccessLogResponse]
    total: int
    page: int
    limit: int
    total_pages: int


# ============================================================================
# Timesheet schemas
# ============================================================================


class TimesheetCreate(BaseModel):
    employee_id: UUID
    start_time: datetime
    end_time: datetime
    regular_hours: Decimal = Field(gt=0, max_digits=5, decimal_places=2)
    overtime_hours: Decimal = Field(default=Decimal("0"), ge=0, max_digits=5, decimal_places=2)


class TimesheetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timesheet_id: UUID
    employee_id: UUID
    start_time: datetime
    end_time: datetime
    regular_hours: Decimal
    overtime_hours: Decimal
    total_hours: Decimal
    total_pay: Decimal


class TimesheetListResponse(BaseModel):
    data: list[TimesheetResponse]
    total: int
    page: int
    limit: int
    total_pages: int


# ============================================================================
# Pay period & payroll schemas
# ============================================================================


class PayPeriodCreate(BaseModel):
    """Get-or-create request for a half-month period."""

    period_type: PayPeriodType
    year: int = Field(ge=1970, le=9999)
    month: int = Field(ge=1, le=12)
    force_recalculate: bool = False


class PayrollResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payroll_id: UUID
    employee_id: UUID
    pay_period_id: UUID
    total_regular_hours: Decimal
    total_overtime_hours: Decimal
    total_hours: Decimal
    gross_pay: Decimal
    status: PayrollStatus
    created_at: datetime


class PayrollListResponse(BaseModel):
    data: list[PayrollResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class PayrollStatusUpdate(BaseModel):
    status: PayrollStatus


class PayPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pay_period_id: UUID
    start_date: datetime
    end_date: datetime
    period_type: PayPeriodType
    status: str
    calculated_at: datetime | None = None
    created_at: datetime
    payrolls: list[PayrollResponse] = []


class PayPeriodListResponse(BaseModel):
    data: list[PayPeriodResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class CalculationResponse(BaseModel):
    pay_period_id: UUID
    payrolls: list[PayrollResponse]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    code: str
    message: str
    details: dict[str, Any] | None = None
