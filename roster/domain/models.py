"""Domain models representing persisted and derived state.

These are pure domain objects with no API input rules.
Django ORM models are in roster/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum

from roster.domain.value_objects import (
    Capacity,
    EnrollmentId,
    EnrollmentStatus,
    SessionId,
    TermId,
    TermWindow,
    Weekday,
)


@dataclass(frozen=True)
class Term:
    """Domain representation of a Term."""

    id: TermId
    name: str
    start_date: date
    end_date: date
    year: int

    @property
    def window(self) -> TermWindow:
        return TermWindow(start=self.start_date, end=self.end_date)


@dataclass(frozen=True)
class Session:
    """Domain representation of a recurring weekly Session.

    ``terms`` keeps the order the session was scheduled with; it is not
    re-sorted by date.
    """

    id: SessionId
    title: str
    weekday: Weekday
    start_time: time
    end_time: time
    capacity: Capacity
    min_age: int
    max_age: int
    terms: tuple[Term, ...] = ()
    location: str = ""


@dataclass(frozen=True)
class Occurrence:
    """One concrete dated instance of a Session. Derived, never stored."""

    session_id: SessionId
    date: date
    start_time: time
    end_time: time

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.date, self.end_time)


@dataclass(frozen=True)
class TermOccurrences:
    """Occurrences produced by a single term window."""

    term: Term
    occurrences: tuple[Occurrence, ...]


@dataclass(frozen=True)
class Enrollment:
    """Domain representation of a participant's enrollment in a Session."""

    id: EnrollmentId
    session_id: SessionId
    participant_id: str
    status: EnrollmentStatus
    created_at: datetime


@dataclass(frozen=True)
class AttendanceRecord:
    """Presence of one enrollment on one occurrence date."""

    session_id: SessionId
    enrollment_id: EnrollmentId
    occurrence_date: date
    present: bool


@dataclass(frozen=True)
class AttendanceEntry:
    """Incoming attendance write, before eligibility checks."""

    enrollment_id: EnrollmentId
    occurrence_date: date
    present: bool


class IneligibilityReason(Enum):
    UNKNOWN_ENROLLMENT = "UNKNOWN_ENROLLMENT"
    NOT_AN_OCCURRENCE = "NOT_AN_OCCURRENCE"
    BEFORE_ADMISSION = "BEFORE_ADMISSION"


@dataclass(frozen=True)
class IneligibleRecord:
    """An attendance write excluded from persistence."""

    enrollment_id: EnrollmentId
    occurrence_date: date
    reason: IneligibilityReason


@dataclass(frozen=True)
class SaveResult:
    saved: int
    rejected: tuple[IneligibleRecord, ...] = ()


class AttendanceBand(Enum):
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


@dataclass(frozen=True)
class AttendanceStats:
    """Presence totals over an enrollment's eligible occurrences."""

    present: int
    total: int
    percent: int

    @property
    def band(self) -> AttendanceBand:
        if self.percent >= 80:
            return AttendanceBand.GOOD
        if self.percent >= 60:
            return AttendanceBand.FAIR
        return AttendanceBand.POOR


@dataclass(frozen=True)
class TransitionRequest:
    """A bulk status change staged by an administrator."""

    enrollment_ids: frozenset[EnrollmentId]
    target_status: EnrollmentStatus


@dataclass(frozen=True)
class RosterSummary:
    """Enrollment counts for a session against its capacity."""

    session_id: SessionId
    capacity: int
    waitlisted: int
    admitted: int
    withdrawn: int

    @property
    def available(self) -> int:
        return max(self.capacity - self.admitted, 0)


@dataclass(frozen=True)
class SheetCell:
    occurrence_date: date
    present: bool
    editable: bool


@dataclass(frozen=True)
class SheetRow:
    enrollment: Enrollment
    cells: tuple[SheetCell, ...]
    stats: AttendanceStats


@dataclass(frozen=True)
class AttendanceSheet:
    """Attendance grid for the admitted enrollments of a session."""

    session: Session
    terms: tuple[TermOccurrences, ...]
    rows: tuple[SheetRow, ...]

    @property
    def dates(self) -> tuple[date, ...]:
        return tuple(o.date for block in self.terms for o in block.occurrences)
