"""Pytest fixtures for HR payroll tests."""

from __future__ import annotations

import base64
import os
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from hr_payroll.database import make_session_factory
from hr_payroll.models import Base, Employee, User, UserRole
from hr_payroll.sin import SINCipher

# Use in-memory SQLite for tests (with async support)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_SALT = "test-salt"
VALID_SIN = "046454286"
OTHER_VALID_SIN = "130692544"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with make_session_factory(engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
def encryption_key() -> str:
    return base64.b64encode(os.urandom(32)).decode("ascii")


@pytest.fixture
def cipher(encryption_key) -> SINCipher:
    return SINCipher(encryption_key, TEST_SALT)


async def make_employee(
    session: AsyncSession,
    pay_rate: Decimal = Decimal("25.00"),
    email: str | None = None,
) -> Employee:
    employee = Employee(
        first_name="Jane",
        last_name="Doe",
        email=email or f"{uuid4().hex[:12]}@example.com",
        address="100 Queen St W",
        pay_rate=pay_rate,
        start_date=date(2024, 1, 8),
    )
    session.add(employee)
    await session.commit()
    return employee


async def make_user(
    session: AsyncSession,
    role: UserRole = UserRole.EMPLOYEE,
    employee: Employee | None = None,
    is_active: bool = True,
) -> User:
    user = User(
        email=f"{uuid4().hex[:12]}@example.com",
        first_name="Test",
        last_name="User",
        role=role.value,
        is_active=is_active,
        employee_id=employee.employee_id if employee else None,
    )
    session.add(user)
    await session.commit()
    return user


async def break_sin_inserts(session: AsyncSession) -> None:
    """Rename a column so every insert into employee_sin fails in the driver."""
    await session.execute(text("ALTER TABLE employee_sin RENAME COLUMN last3 TO last_three"))
    await session.commit()


@pytest.fixture
async def employee(session) -> Employee:
    """Employee paid $25.00/hour."""
    return await make_employee(session)


@pytest.fixture
async def manager(session) -> User:
    return await make_user(session, role=UserRole.MANAGER)


@pytest.fixture
async def employee_user(session, employee) -> User:
    """Login belonging to the ``employee`` fixture."""
    return await make_user(session, employee=employee)


@pytest.fixture
async def outsider(session) -> User:
    """Non-manager login linked to a different employee."""
    other = await make_employee(session)
    return await make_user(session, employee=other)
