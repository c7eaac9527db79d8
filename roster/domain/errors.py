"""Domain error codes for the roster module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    TERM_NOT_FOUND = "TERM_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ENROLLMENT_NOT_FOUND = "ENROLLMENT_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INELIGIBLE_RECORD = "INELIGIBLE_RECORD"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class TermNotFoundError(DomainError):
    """Raised when a term is not found."""

    def __init__(self, term_id: str) -> None:
        super().__init__(
            code=ErrorCode.TERM_NOT_FOUND,
            message="Term not found",
        )
        self.term_id = term_id


class SessionNotFoundError(DomainError):
    """Raised when a session is not found."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
        )
        self.session_id = session_id


class EnrollmentNotFoundError(DomainError):
    """Raised when one or more enrollments are not found."""

    def __init__(self, *enrollment_ids: str) -> None:
        super().__init__(
            code=ErrorCode.ENROLLMENT_NOT_FOUND,
            message="Enrollment not found",
        )
        self.enrollment_ids = tuple(enrollment_ids)


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message="Invalid ID format",
        )


class ValidationError(DomainError):
    """Raised when a Term or Session breaks a domain rule.

    ``errors`` maps each offending field to a user-safe message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message="; ".join(f"{field}: {msg}" for field, msg in errors.items()),
        )
        self.errors = dict(errors)


class CapacityExceededError(DomainError):
    """Raised when admitting a batch would overfill a session."""

    def __init__(self, session_id: str, available: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message=f"Only {available} place(s) available",
        )
        self.session_id = session_id
        self.available = available
