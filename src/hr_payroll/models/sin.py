"""Encrypted SIN storage and access audit models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_payroll.models.base import Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from hr_payroll.models.employee import Employee


class SINAccessLevel(str, Enum):
    """Visibility level recorded on a stored SIN."""

    EMPLOYEE = "EMPLOYEE"  # last 3 digits only
    MANAGER = "MANAGER"  # full number, e.g. for T4 slips


class SINAccessType(str, Enum):
    """Kind of read requested against the vault."""

    STANDARD_VIEW = "STANDARD_VIEW"
    PRIVILEGED_VIEW = "PRIVILEGED_VIEW"


class EmployeeSIN(Base, TimestampMixin):
    """One encrypted SIN per employee."""

    __tablename__ = "employee_sin"

    sin_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    # {"iv": ..., "content": ..., "authTag": ...}, each base64
    encrypted_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    last3: Mapped[str] = mapped_column(String(3), nullable=False)
    search_hash: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    access_level: Mapped[str] = mapped_column(
        String, nullable=False, default=SINAccessLevel.EMPLOYEE.value
    )

    __table_args__ = (
        CheckConstraint(
            "access_level IN ('EMPLOYEE', 'MANAGER')",
            name="employee_sin_access_level_check",
        ),
    )

    employee: Mapped[Employee] = relationship(back_populates="sin")


class SINAccessLog(Base):
    """Append-only record of every vault read."""

    __tablename__ = "sin_access_log"

    access_log_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    access_type: Mapped[str] = mapped_column(String(20), nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    granted: Mapped[bool] = mapped_column(Boolean, nullable=False)
    accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        CheckConstraint(
            "access_type IN ('STANDARD_VIEW', 'PRIVILEGED_VIEW')",
            name="sin_access_log_type_check",
        ),
    )
