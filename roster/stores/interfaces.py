"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence

from roster.domain import (
    AttendanceRecord,
    Enrollment,
    EnrollmentId,
    EnrollmentStatus,
    Session,
    SessionId,
    Term,
    TermId,
)

# Called inside the store's transaction with the locked session, its current
# admitted count, and the enrollments of that session named by the batch.
# Returns the enrollments to update, or raises to abort the whole batch.
TransitionCheck = Callable[[Session, int, Sequence[Enrollment]], Sequence[Enrollment]]


class TermStore(ABC):
    """Interface for term lookups."""

    @abstractmethod
    def list_terms(self) -> list[Term]:
        """Return all terms ordered by start_date ascending."""
        ...

    @abstractmethod
    def get_term(self, term_id: TermId) -> Term | None:
        """Return a term by ID, or None if not found."""
        ...


class SessionStore(ABC):
    """Interface for session lookups."""

    @abstractmethod
    def get_session(self, session_id: SessionId) -> Session | None:
        """Return a session with its terms resolved, or None if not found."""
        ...


class EnrollmentStore(ABC):
    """Interface for enrollment persistence operations."""

    @abstractmethod
    def list_enrollments(
        self,
        session_id: SessionId,
        status: EnrollmentStatus | None = None,
    ) -> list[Enrollment]:
        """Return enrollments of a session ordered by created_at ascending."""
        ...

    @abstractmethod
    def get_enrollment(self, enrollment_id: EnrollmentId) -> Enrollment | None:
        """Return an enrollment by ID, or None if not found."""
        ...

    @abstractmethod
    def get_enrollments(self, enrollment_ids: Iterable[EnrollmentId]) -> list[Enrollment]:
        """Return the enrollments that exist among ``enrollment_ids``."""
        ...

    @abstractmethod
    def count_admitted(self, session_id: SessionId) -> int:
        """Return the number of admitted enrollments of a session."""
        ...

    @abstractmethod
    def create_enrollment(self, session_id: SessionId, participant_id: str) -> Enrollment:
        """Create a waitlisted enrollment stamped with the current time.

        Raises:
            ValidationError: If the participant is already enrolled in the session.
        """
        ...

    @abstractmethod
    def apply_transition(
        self,
        enrollment_ids: frozenset[EnrollmentId],
        target_status: EnrollmentStatus,
        check: TransitionCheck,
    ) -> int:
        """Atomically move enrollments to ``target_status``.

        For each affected session the store locks the session, reads the
        admitted count, and calls ``check``. All sessions are checked before
        anything is written; if any check raises, nothing is written.

        Returns the number of enrollments whose status changed.

        Raises:
            EnrollmentNotFoundError: If any ID does not exist.
        """
        ...


class AttendanceStore(ABC):
    """Interface for attendance record persistence operations."""

    @abstractmethod
    def list_records(self, session_id: SessionId) -> list[AttendanceRecord]:
        """Return all attendance records of a session."""
        ...

    @abstractmethod
    def list_records_for_enrollment(self, enrollment_id: EnrollmentId) -> list[AttendanceRecord]:
        """Return all attendance records of one enrollment."""
        ...

    @abstractmethod
    def save_records(self, records: Sequence[AttendanceRecord]) -> int:
        """Create or overwrite records in a single transaction.

        Returns the number of records written.
        """
        ...
