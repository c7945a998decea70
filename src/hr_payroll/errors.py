"""Application error taxonomy.

Every error that crosses a service boundary is an ``AppError`` carrying an
``ErrorKind`` so callers can match on the kind instead of the class.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Machine-readable error categories."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    DATABASE = "DATABASE"


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing or invalid."""


class AppError(Exception):
    """Base class for errors surfaced to callers."""

    kind: ErrorKind = ErrorKind.DATABASE
    code: str = "APP_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for transport."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AppError):
    """Malformed or semantically invalid input."""

    kind = ErrorKind.VALIDATION
    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource} not found")


class ForbiddenError(AppError):
    """Caller is known but not allowed to perform the action."""

    kind = ErrorKind.FORBIDDEN
    code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class DatabaseError(AppError):
    """Persistence failure not otherwise classified."""

    kind = ErrorKind.DATABASE
    code = "DATABASE_ERROR"


class SINIntegrityError(DatabaseError):
    """Stored ciphertext failed authentication or validation on decrypt."""

    code = "INTEGRITY_ERROR"

    def __init__(self) -> None:
        super().__init__("Stored SIN failed integrity verification")
