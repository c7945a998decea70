"""Tests for the SIN vault: storage, role-gated reads and the audit trail."""

from __future__ import annotations

import logging
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.errors import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    SINIntegrityError,
    ValidationError,
)
from hr_payroll.models import EmployeeSIN, SINAccessLog, SINAccessType, UserRole
from hr_payroll.sin import AccessDecision, AccessLogFilters, SINVault, decide_access

from tests.conftest import (
    OTHER_VALID_SIN,
    VALID_SIN,
    break_sin_inserts,
    make_employee,
    make_user,
)


@pytest.fixture
def vault(session, cipher) -> SINVault:
    return SINVault(session, cipher)


async def _log_count(session) -> int:
    return await session.scalar(select(func.count()).select_from(SINAccessLog))


class TestDecideAccess:
    @pytest.mark.parametrize(
        ("is_manager", "is_self", "access_type", "expected"),
        [
            (True, False, SINAccessType.PRIVILEGED_VIEW, AccessDecision.FULL),
            (True, True, SINAccessType.PRIVILEGED_VIEW, AccessDecision.FULL),
            (True, False, SINAccessType.STANDARD_VIEW, AccessDecision.MASKED),
            (False, True, SINAccessType.STANDARD_VIEW, AccessDecision.MASKED),
            (False, True, SINAccessType.PRIVILEGED_VIEW, AccessDecision.MASKED),
            (False, False, SINAccessType.STANDARD_VIEW, AccessDecision.DENIED),
            (False, False, SINAccessType.PRIVILEGED_VIEW, AccessDecision.DENIED),
        ],
    )
    def test_decision_table(self, is_manager, is_self, access_type, expected):
        assert decide_access(is_manager, is_self, access_type) == expected


class TestStore:
    async def test_store_returns_public_view(self, vault, employee):
        view = await vault.store(employee.employee_id, VALID_SIN)

        assert view.employee_id == employee.employee_id
        assert view.last3 == "286"
        assert view.access_level == "EMPLOYEE"
        assert not hasattr(view, "encrypted_data")
        assert not hasattr(view, "search_hash")

    async def test_plaintext_is_not_persisted(self, vault, session, cipher, employee):
        await vault.store(employee.employee_id, VALID_SIN)

        record = await session.scalar(
            select(EmployeeSIN).where(EmployeeSIN.employee_id == employee.employee_id)
        )
        assert VALID_SIN not in str(record.encrypted_data)
        assert set(record.encrypted_data) == {"iv", "content", "authTag"}
        assert record.search_hash == cipher.search_hash(VALID_SIN)

    async def test_invalid_sin_rejected(self, vault, session, employee):
        with pytest.raises(ValidationError, match="Invalid SIN"):
            await vault.store(employee.employee_id, "046454287")

        assert await session.scalar(select(func.count()).select_from(EmployeeSIN)) == 0

    async def test_unknown_employee(self, vault):
        with pytest.raises(NotFoundError, match="Employee not found"):
            await vault.store(uuid4(), VALID_SIN)

    async def test_second_sin_for_employee_rejected(self, vault, employee):
        await vault.store(employee.employee_id, VALID_SIN)

        with pytest.raises(ValidationError, match="already exists for this employee"):
            await vault.store(employee.employee_id, OTHER_VALID_SIN)

    async def test_same_sin_for_two_employees_rejected(self, vault, session, employee):
        other = await make_employee(session)
        await vault.store(employee.employee_id, VALID_SIN)

        with pytest.raises(ValidationError, match="another employee"):
            await vault.store(other.employee_id, VALID_SIN)

    async def test_public_view_lookup(self, vault, employee):
        await vault.store(employee.employee_id, VALID_SIN)

        view = await vault.get_public_view(employee.employee_id)
        assert view.last3 == "286"

        with pytest.raises(NotFoundError):
            await vault.get_public_view(uuid4())

    async def test_failed_insert_hides_sql_and_key_material(
        self, vault, session, cipher, employee, caplog
    ):
        employee_id = employee.employee_id
        await break_sin_inserts(session)

        with caplog.at_level(logging.ERROR, logger="hr_payroll.sin.vault"):
            with pytest.raises(DatabaseError) as exc_info:
                await vault.store(employee_id, VALID_SIN)

        error = exc_info.value
        body = str(error.to_dict())
        assert error.message == "Error storing SIN"
        assert cipher.search_hash(VALID_SIN) not in body
        assert "authTag" not in body
        assert "INSERT" not in body
        assert isinstance(error.__cause__, SQLAlchemyError)
        assert f"Error storing SIN for employee {employee_id}" in caplog.text


class TestRetrieve:
    @pytest.fixture
    async def stored(self, vault, employee):
        await vault.store(employee.employee_id, VALID_SIN)
        return employee

    async def test_manager_privileged_view_gets_full_number(self, vault, stored, manager):
        value = await vault.retrieve(
            manager.user_id, stored.employee_id, SINAccessType.PRIVILEGED_VIEW, "10.0.0.1"
        )
        assert value == "046-454-286"

    async def test_manager_standard_view_is_masked(self, vault, stored, manager):
        value = await vault.retrieve(
            manager.user_id, stored.employee_id, SINAccessType.STANDARD_VIEW, None
        )
        assert value == "XXX-XXX-286"

    @pytest.mark.parametrize("access_type", list(SINAccessType))
    async def test_employee_sees_own_sin_masked(
        self, vault, stored, employee_user, access_type
    ):
        value = await vault.retrieve(employee_user.user_id, stored.employee_id, access_type, None)
        assert value == "XXX-XXX-286"

    async def test_other_employee_denied_and_logged(self, vault, session, stored, outsider):
        with pytest.raises(ForbiddenError):
            await vault.retrieve(
                outsider.user_id, stored.employee_id, SINAccessType.STANDARD_VIEW, "10.0.0.9"
            )

        entry = await session.scalar(select(SINAccessLog))
        assert entry.user_id == outsider.user_id
        assert entry.granted is False
        assert entry.ip_address == "10.0.0.9"

    async def test_every_read_appends_one_log_entry(
        self, vault, session, stored, manager, employee_user
    ):
        await vault.retrieve(manager.user_id, stored.employee_id, "PRIVILEGED_VIEW", "1.1.1.1")
        await vault.retrieve(manager.user_id, stored.employee_id, "STANDARD_VIEW", "1.1.1.1")
        await vault.retrieve(employee_user.user_id, stored.employee_id, "STANDARD_VIEW", None)

        entries = (await session.scalars(select(SINAccessLog))).all()
        assert len(entries) == 3
        assert all(e.granted for e in entries)
        assert {e.access_type for e in entries} == {"PRIVILEGED_VIEW", "STANDARD_VIEW"}

    async def test_missing_sin_is_not_found_and_not_logged(self, vault, session, manager):
        with pytest.raises(NotFoundError, match="SIN not found"):
            await vault.retrieve(manager.user_id, uuid4(), SINAccessType.STANDARD_VIEW, None)

        assert await _log_count(session) == 0

    async def test_unknown_user(self, vault, stored):
        with pytest.raises(NotFoundError, match="User not found"):
            await vault.retrieve(uuid4(), stored.employee_id, SINAccessType.STANDARD_VIEW, None)

    async def test_unknown_user_checked_before_sin(self, vault, session, stored):
        without_sin = await make_employee(session)

        for employee_id in (stored.employee_id, without_sin.employee_id, uuid4()):
            with pytest.raises(NotFoundError, match="User not found"):
                await vault.retrieve(uuid4(), employee_id, SINAccessType.STANDARD_VIEW, None)

        assert await _log_count(session) == 0

    async def test_inactive_user(self, vault, session, stored):
        inactive = await make_user(session, role=UserRole.MANAGER, is_active=False)

        with pytest.raises(NotFoundError):
            await vault.retrieve(
                inactive.user_id, stored.employee_id, SINAccessType.PRIVILEGED_VIEW, None
            )

    async def test_unknown_access_type(self, vault, stored, manager):
        with pytest.raises(ValidationError, match="Unknown access type"):
            await vault.retrieve(manager.user_id, stored.employee_id, "SUPER_VIEW", None)

    async def test_tampered_record_fails_integrity(self, vault, session, stored, manager):
        record = await session.scalar(
            select(EmployeeSIN).where(EmployeeSIN.employee_id == stored.employee_id)
        )
        envelope = dict(record.encrypted_data)
        envelope["authTag"] = envelope["iv"]
        record.encrypted_data = envelope
        await session.commit()

        with pytest.raises(SINIntegrityError):
            await vault.retrieve(
                manager.user_id, stored.employee_id, SINAccessType.PRIVILEGED_VIEW, None
            )

        # Masked reads never decrypt
        value = await vault.retrieve(
            manager.user_id, stored.employee_id, SINAccessType.STANDARD_VIEW, None
        )
        assert value == "XXX-XXX-286"

    async def test_audit_failure_does_not_block_read(
        self, vault, session, stored, manager, monkeypatch, caplog
    ):
        async def failing_commit(self):
            raise SQLAlchemyError("audit table unavailable")

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)

        with caplog.at_level(logging.ERROR, logger="hr_payroll.sin.vault"):
            value = await vault.retrieve(
                manager.user_id, stored.employee_id, SINAccessType.PRIVILEGED_VIEW, None
            )

        assert value == "046-454-286"
        assert "Failed to log SIN access" in caplog.text


class TestAccessLogs:
    async def test_filter_and_paginate(self, vault, session, employee, manager, employee_user):
        other = await make_employee(session)
        await vault.store(employee.employee_id, VALID_SIN)
        await vault.store(other.employee_id, OTHER_VALID_SIN)

        for _ in range(3):
            await vault.retrieve(manager.user_id, employee.employee_id, "STANDARD_VIEW", None)
        await vault.retrieve(employee_user.user_id, employee.employee_id, "STANDARD_VIEW", None)
        await vault.retrieve(manager.user_id, other.employee_id, "STANDARD_VIEW", None)

        page = await vault.list_access_logs(
            AccessLogFilters(employee_id=employee.employee_id, page=1, limit=2)
        )
        assert page.total == 4
        assert len(page.data) == 2
        assert page.total_pages == 2

        by_user = await vault.list_access_logs(AccessLogFilters(user_id=employee_user.user_id))
        assert by_user.total == 1
        assert by_user.data[0].accessed_at.tzinfo is not None

    async def test_newest_first(self, vault, employee, manager):
        await vault.store(employee.employee_id, VALID_SIN)
        await vault.retrieve(manager.user_id, employee.employee_id, "STANDARD_VIEW", None)
        await vault.retrieve(manager.user_id, employee.employee_id, "PRIVILEGED_VIEW", None)

        page = await vault.list_access_logs(AccessLogFilters())
        assert [e.access_type for e in page.data] == ["PRIVILEGED_VIEW", "STANDARD_VIEW"]

    async def test_bad_pagination(self, vault):
        with pytest.raises(ValidationError):
            await vault.list_access_logs(AccessLogFilters(limit=0))
