from roster.stores.interfaces import (
    AttendanceStore,
    EnrollmentStore,
    SessionStore,
    TermStore,
    TransitionCheck,
)

__all__ = [
    "AttendanceStore",
    "EnrollmentStore",
    "SessionStore",
    "TermStore",
    "TransitionCheck",
]
