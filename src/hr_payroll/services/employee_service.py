"""Employee and user records consumed by the vault and payroll services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.errors import DatabaseError, NotFoundError, ValidationError
from hr_payroll.models import Employee, User, UserRole
from hr_payroll.types import Page, validate_pagination

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewEmployee:
    first_name: str
    last_name: str
    email: str
    pay_rate: Decimal
    start_date: date
    address: str = ""
    date_of_birth: date | None = None


@dataclass(frozen=True)
class NewUser:
    email: str
    first_name: str
    last_name: str
    role: UserRole | str = UserRole.EMPLOYEE
    employee_id: UUID | None = None


class EmployeeService:
    """CRUD for employees and the logins linked to them."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_employee(self, data: NewEmployee) -> Employee:
        if Decimal(data.pay_rate) <= 0:
            raise ValidationError("Pay rate must be greater than 0")

        try:
            taken = await self.session.scalar(
                select(Employee.employee_id).where(Employee.email == data.email)
            )
            if taken is not None:
                raise ValidationError("Employee with this email already exists")

            employee = Employee(
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                address=data.address,
                date_of_birth=data.date_of_birth,
                pay_rate=Decimal(data.pay_rate),
                start_date=data.start_date,
            )
            self.session.add(employee)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValidationError("Employee with this email already exists") from None
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Error creating employee")
            raise DatabaseError("Error creating employee") from exc
        return employee

    async def get_employee(self, employee_id: UUID) -> Employee:
        try:
            employee = await self.session.get(Employee, employee_id)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching employee")
            raise DatabaseError("Error fetching employee") from exc
        if employee is None:
            raise NotFoundError("Employee")
        return employee

    async def list_employees(self, page: int = 1, limit: int = 10) -> Page[Employee]:
        validate_pagination(page, limit)
        try:
            total = await self.session.scalar(select(func.count(Employee.employee_id))) or 0
            result = await self.session.execute(
                select(Employee)
                .order_by(Employee.last_name, Employee.first_name)
                .offset((page - 1) * limit)
                .limit(limit)
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching employees")
            raise DatabaseError("Error fetching employees") from exc
        return Page(data=list(result.scalars().all()), total=total, page=page, limit=limit)

    async def create_user(self, data: NewUser) -> User:
        try:
            role = UserRole(data.role)
        except ValueError:
            raise ValidationError(f"Invalid role: {data.role}") from None

        try:
            if data.employee_id is not None and await self.session.get(Employee, data.employee_id) is None:
                raise NotFoundError("Employee")

            user = User(
                email=data.email,
                first_name=data.first_name,
                last_name=data.last_name,
                role=role.value,
                employee_id=data.employee_id,
            )
            self.session.add(user)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValidationError("User with this email already exists") from None
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Error creating user")
            raise DatabaseError("Error creating user") from exc
        return user

    async def get_user(self, user_id: UUID) -> User:
        try:
            user = await self.session.get(User, user_id)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching user")
            raise DatabaseError("Error fetching user") from exc
        if user is None:
            raise NotFoundError("User")
        return user
