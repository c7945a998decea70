"""Pay period and payroll state machines with transition validation."""

from __future__ import annotations

from hr_payroll.errors import ValidationError
from hr_payroll.models import PayPeriodStatus, PayrollStatus


class InvalidTransitionError(ValidationError):
    """Raised when an invalid state transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, message: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            message or f"Invalid transition from '{from_status}' to '{to_status}'",
            details={"from_status": from_status, "to_status": to_status},
        )


def _value(status: str) -> str:
    return status.value if hasattr(status, "value") else str(status)


class PayPeriodStateMachine:
    """State machine for pay period status.

    Allowed transitions:
    - PROCESSING → COMPLETED

    COMPLETED is terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayPeriodStatus.PROCESSING.value: [PayPeriodStatus.COMPLETED.value],
        PayPeriodStatus.COMPLETED.value: [],  # Terminal state
    }

    # Statuses where payroll may be (re)calculated
    CALCULATION_ALLOWED = {PayPeriodStatus.PROCESSING.value}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), [])
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Raise InvalidTransitionError with a status-specific message."""
        from_status, to_status = _value(from_status), _value(to_status)
        if cls.can_transition(from_status, to_status):
            return

        if from_status == PayPeriodStatus.COMPLETED.value:
            message = "Cannot change status of COMPLETED pay period"
        elif from_status == to_status:
            message = f"Pay period is already {from_status}"
        elif to_status not in cls.VALID_TRANSITIONS:
            message = f"Unknown pay period status '{to_status}'"
        else:
            message = f"Pay period cannot move from {from_status} to {to_status}"
        raise InvalidTransitionError(from_status, to_status, message)

    @classmethod
    def can_calculate(cls, status: str) -> bool:
        """Check if payroll calculation is allowed in this status."""
        return _value(status) in cls.CALCULATION_ALLOWED

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(_value(current_status), [])


class PayrollStateMachine:
    """State machine for per-employee payroll status.

    Allowed transitions:
    - DRAFT → CONFIRMED
    - CONFIRMED → SENT
    - SENT → COMPLETED
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.DRAFT.value: [PayrollStatus.CONFIRMED.value],
        PayrollStatus.CONFIRMED.value: [PayrollStatus.SENT.value],
        PayrollStatus.SENT.value: [PayrollStatus.COMPLETED.value],
        PayrollStatus.COMPLETED.value: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), [])
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        from_status, to_status = _value(from_status), _value(to_status)
        if cls.can_transition(from_status, to_status):
            return

        if from_status == PayrollStatus.COMPLETED.value:
            message = "Cannot change status of COMPLETED payroll"
        elif to_status not in cls.VALID_TRANSITIONS:
            message = f"Unknown payroll status '{to_status}'"
        else:
            message = f"Payroll cannot move from {from_status} to {to_status}"
        raise InvalidTransitionError(from_status, to_status, message)
