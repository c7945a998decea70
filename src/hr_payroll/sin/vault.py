"""SIN vault - encrypted storage with role-gated, audited reads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.errors import DatabaseError, ForbiddenError, NotFoundError, ValidationError
from hr_payroll.models import (
    Employee,
    EmployeeSIN,
    SINAccessLevel,
    SINAccessLog,
    SINAccessType,
    User,
    utcnow,
)
from hr_payroll.sin.cipher import EncryptedSINData, SINCipher
from hr_payroll.sin.luhn import format_sin, is_valid_sin, mask_sin
from hr_payroll.types import AccessLogView, Page, SINPublicView, validate_pagination

logger = logging.getLogger(__name__)


class AccessDecision(str, Enum):
    """Outcome of the vault's authorization check."""

    FULL = "FULL"
    MASKED = "MASKED"
    DENIED = "DENIED"


def decide_access(
    is_manager: bool,
    is_self: bool,
    access_type: SINAccessType,
) -> AccessDecision:
    """Decide what a caller may see, in priority order.

    1. Managers asking for a privileged view get the full number.
    2. The employee themself, or any manager, gets the masked form.
    3. Everyone else is denied.
    """
    if access_type == SINAccessType.PRIVILEGED_VIEW and is_manager:
        return AccessDecision.FULL
    if is_self or is_manager:
        return AccessDecision.MASKED
    return AccessDecision.DENIED


@dataclass(frozen=True)
class AccessLogFilters:
    """Filters for listing audit entries."""

    employee_id: UUID | None = None
    user_id: UUID | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    page: int = 1
    limit: int = 10


class SINVault:
    """Stores one encrypted SIN per employee and gates every read.

    Operations:
    - store: validate, hash, encrypt and persist a new SIN
    - retrieve: authorize a read, audit it, return full or masked SIN
    - get_public_view: non-sensitive metadata for a stored SIN
    - list_access_logs: paginated audit trail
    """

    def __init__(self, session: AsyncSession, cipher: SINCipher):
        self.session = session
        self.cipher = cipher

    async def store(self, employee_id: UUID, sin_number: str) -> SINPublicView:
        """Encrypt and persist a SIN for an employee.

        Raises ValidationError for a malformed or duplicate SIN and
        NotFoundError when the employee does not exist.
        """
        if not is_valid_sin(sin_number):
            raise ValidationError("Invalid SIN number")

        try:
            employee = await self.session.get(Employee, employee_id)
            if employee is None:
                raise NotFoundError("Employee")

            existing = await self.session.scalar(
                select(EmployeeSIN.sin_id).where(EmployeeSIN.employee_id == employee_id)
            )
            if existing is not None:
                raise ValidationError("SIN already exists for this employee")

            search_hash = self.cipher.search_hash(sin_number)
            duplicate = await self.session.scalar(
                select(EmployeeSIN.sin_id).where(EmployeeSIN.search_hash == search_hash)
            )
            if duplicate is not None:
                raise ValidationError("SIN is already registered to another employee")

            record = EmployeeSIN(
                employee_id=employee_id,
                encrypted_data=self.cipher.encrypt(sin_number).to_json(),
                last3=sin_number[-3:],
                search_hash=search_hash,
                access_level=SINAccessLevel.EMPLOYEE.value,
            )
            self.session.add(record)
            await self.session.commit()
        except IntegrityError:
            # A concurrent store won the race on one of the unique indexes
            await self.session.rollback()
            raise ValidationError("SIN already exists") from None
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Error storing SIN for employee %s", employee_id)
            raise DatabaseError("Error storing SIN") from exc

        logger.info("Stored SIN for employee %s", employee_id)
        return SINPublicView.from_model(record)

    async def retrieve(
        self,
        acting_user_id: UUID,
        employee_id: UUID,
        access_type: SINAccessType | str,
        ip_address: str | None,
    ) -> str:
        """Return the SIN as the caller is allowed to see it.

        Every call that reaches the authorization check is written to the
        access log, whether granted or not.
        Unknown or inactive callers are rejected before the SIN is looked up.
        """
        try:
            access_type = SINAccessType(access_type)
        except ValueError:
            raise ValidationError(f"Unknown access type: {access_type}") from None

        try:
            user = await self.session.get(User, acting_user_id)
            if user is None or not user.is_active:
                raise NotFoundError("User")

            record = await self.session.scalar(
                select(EmployeeSIN).where(EmployeeSIN.employee_id == employee_id)
            )
            if record is None:
                raise NotFoundError("SIN")
        except SQLAlchemyError as exc:
            logger.exception("Error retrieving SIN for employee %s", employee_id)
            raise DatabaseError("Error retrieving SIN") from exc

        # The audit write may roll back the session, so read everything first
        last3 = record.last3
        envelope = dict(record.encrypted_data)
        decision = decide_access(
            is_manager=user.is_manager,
            is_self=user.employee_id == employee_id,
            access_type=access_type,
        )

        await self._record_access(
            employee_id=employee_id,
            user_id=acting_user_id,
            access_type=access_type,
            ip_address=ip_address,
            granted=decision != AccessDecision.DENIED,
        )

        if decision == AccessDecision.FULL:
            return format_sin(self.cipher.decrypt(EncryptedSINData.from_json(envelope)))
        if decision == AccessDecision.MASKED:
            return mask_sin(last3)
        raise ForbiddenError("Access denied")

    async def get_public_view(self, employee_id: UUID) -> SINPublicView:
        """Metadata for an employee's stored SIN."""
        try:
            record = await self.session.scalar(
                select(EmployeeSIN).where(EmployeeSIN.employee_id == employee_id)
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching SIN")
            raise DatabaseError("Error fetching SIN") from exc
        if record is None:
            raise NotFoundError("SIN")
        return SINPublicView.from_model(record)

    async def list_access_logs(self, filters: AccessLogFilters) -> Page[AccessLogView]:
        """List audit entries, newest first."""
        validate_pagination(filters.page, filters.limit)

        query = select(SINAccessLog)
        if filters.employee_id is not None:
            query = query.where(SINAccessLog.employee_id == filters.employee_id)
        if filters.user_id is not None:
            query = query.where(SINAccessLog.user_id == filters.user_id)
        if filters.start_date is not None:
            query = query.where(SINAccessLog.accessed_at >= filters.start_date)
        if filters.end_date is not None:
            query = query.where(SINAccessLog.accessed_at <= filters.end_date)

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(query.subquery())
            ) or 0
            result = await self.session.execute(
                query.order_by(SINAccessLog.accessed_at.desc())
                .offset((filters.page - 1) * filters.limit)
                .limit(filters.limit)
            )
        except SQLAlchemyError as exc:
            logger.exception("Error fetching SIN access logs")
            raise DatabaseError("Error fetching SIN access logs") from exc

        return Page(
            data=[AccessLogView.from_model(entry) for entry in result.scalars().all()],
            total=total,
            page=filters.page,
            limit=filters.limit,
        )

    async def _record_access(
        self,
        employee_id: UUID,
        user_id: UUID,
        access_type: SINAccessType,
        ip_address: str | None,
        granted: bool,
    ) -> None:
        """Append an audit entry. Failures are logged, never raised."""
        entry = SINAccessLog(
            employee_id=employee_id,
            user_id=user_id,
            access_type=access_type.value,
            ip_address=ip_address,
            granted=granted,
            accessed_at=utcnow(),
        )
        try:
            self.session.add(entry)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.exception(
                "Failed to log SIN access: employee=%s user=%s type=%s",
                employee_id,
                user_id,
                access_type.value,
            )
