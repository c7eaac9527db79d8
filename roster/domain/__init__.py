from roster.domain.models import (
    AttendanceEntry,
    AttendanceRecord,
    AttendanceSheet,
    AttendanceStats,
    Enrollment,
    IneligibleRecord,
    Occurrence,
    RosterSummary,
    SaveResult,
    Session,
    Term,
    TermOccurrences,
    TransitionRequest,
)
from roster.domain.value_objects import (
    Capacity,
    EnrollmentId,
    EnrollmentStatus,
    SessionId,
    TermId,
    TermWindow,
    Weekday,
)

__all__ = [
    "AttendanceEntry",
    "AttendanceRecord",
    "AttendanceSheet",
    "AttendanceStats",
    "Enrollment",
    "IneligibleRecord",
    "Occurrence",
    "RosterSummary",
    "SaveResult",
    "Session",
    "Term",
    "TermOccurrences",
    "TransitionRequest",
    "Capacity",
    "EnrollmentId",
    "EnrollmentStatus",
    "SessionId",
    "TermId",
    "TermWindow",
    "Weekday",
]
