"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import date
from enum import Enum, IntEnum
from typing import Self
from uuid import UUID


@dataclass(frozen=True)
class TermId:
    """Unique identifier for a Term."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EnrollmentId:
    """Unique identifier for an Enrollment."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Maximum number of admitted enrollments; at least one."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Capacity must be at least 1")


class Weekday(IntEnum):
    """Day of the week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


class EnrollmentStatus(str, Enum):
    """Admission state of an enrollment."""

    WAITLISTED = "waitlisted"
    ADMITTED = "admitted"
    WITHDRAWN = "withdrawn"


@dataclass(frozen=True)
class TermWindow:
    """Inclusive calendar date range covered by a term.

    A window whose start falls after its end is allowed and simply
    contains no days.
    """

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end
