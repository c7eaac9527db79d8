"""Admission workflow for enrollments.

Any status may move to any other status; there is no terminal state, and
freeing a place never promotes anyone from the waitlist automatically.
"""

from collections.abc import Sequence

from roster.domain.errors import CapacityExceededError
from roster.domain.models import Enrollment, Session
from roster.domain.value_objects import EnrollmentStatus

INITIAL_STATUS = EnrollmentStatus.WAITLISTED

# Every status currently reaches every other. This table is the one place to
# restrict a move; check_batch drops enrollments whose move it does not allow.
TRANSITIONS: dict[EnrollmentStatus, frozenset[EnrollmentStatus]] = {
    status: frozenset(EnrollmentStatus) - {status} for status in EnrollmentStatus
}


class EnrollmentStateMachine:
    """Decides whether a batch of enrollments may move to a target status."""

    def can_transition(self, current: EnrollmentStatus, target: EnrollmentStatus) -> bool:
        return current == target or target in TRANSITIONS[current]

    def check_batch(
        self,
        session: Session,
        admitted_count: int,
        enrollments: Sequence[Enrollment],
        target: EnrollmentStatus,
    ) -> list[Enrollment]:
        """Return the enrollments of ``session`` whose status will change.

        ``admitted_count`` must be read inside the same transaction that
        applies the change.

        Raises:
            CapacityExceededError: If admitting the batch would put more than
                ``session.capacity`` enrollments in the admitted state. The
                whole batch is rejected.
        """
        changing = [
            e
            for e in enrollments
            if e.status != target and self.can_transition(e.status, target)
        ]

        if target == EnrollmentStatus.ADMITTED:
            newcomers = len(changing)
            capacity = session.capacity.value
            if admitted_count + newcomers > capacity:
                raise CapacityExceededError(
                    session_id=str(session.id),
                    available=max(capacity - admitted_count, 0),
                )

        return changing
