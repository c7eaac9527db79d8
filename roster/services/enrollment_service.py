"""Enrollment service - signups, bulk admission changes, and roster counts."""

import logging
from collections.abc import Iterable

from roster.domain import (
    Enrollment,
    EnrollmentId,
    EnrollmentStatus,
    RosterSummary,
    SessionId,
    TransitionRequest,
)
from roster.domain.errors import (
    CapacityExceededError,
    EnrollmentNotFoundError,
    SessionNotFoundError,
    ValidationError,
)
from roster.domain.state_machine import EnrollmentStateMachine
from roster.services.ids import parse_id
from roster.stores.interfaces import EnrollmentStore, SessionStore

logger = logging.getLogger(__name__)


def parse_status(value: str) -> EnrollmentStatus:
    try:
        return EnrollmentStatus(str(value).lower())
    except ValueError:
        allowed = ", ".join(s.value for s in EnrollmentStatus)
        raise ValidationError({"target_status": f"Status must be one of: {allowed}"}) from None


class EnrollmentService:
    """Service for the waitlist / admitted / withdrawn workflow."""

    def __init__(
        self,
        sessions: SessionStore,
        enrollments: EnrollmentStore,
        state_machine: EnrollmentStateMachine | None = None,
    ) -> None:
        self._sessions = sessions
        self._enrollments = enrollments
        self._state_machine = state_machine or EnrollmentStateMachine()

    def _require_session(self, session_id: str) -> SessionId:
        sid = parse_id(SessionId, session_id)
        if self._sessions.get_session(sid) is None:
            raise SessionNotFoundError(session_id)
        return sid

    def register(self, session_id: str, participant_id: str) -> Enrollment:
        """Sign a participant up for a session. New enrollments start waitlisted.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
            ValidationError: If the participant is blank or already enrolled.
        """
        sid = self._require_session(session_id)
        participant_id = (participant_id or "").strip()
        if not participant_id:
            raise ValidationError({"participant_id": "Participant is required"})

        enrollment = self._enrollments.create_enrollment(sid, participant_id)
        logger.info(
            "Registered participant=%s session=%s enrollment=%s",
            participant_id,
            sid,
            enrollment.id,
        )
        return enrollment

    def get_enrollment(self, enrollment_id: str) -> Enrollment:
        """Return an enrollment by ID.

        Raises:
            InvalidIdError: If the enrollment_id is not a valid UUID.
            EnrollmentNotFoundError: If the enrollment does not exist.
        """
        enrollment = self._enrollments.get_enrollment(parse_id(EnrollmentId, enrollment_id))
        if enrollment is None:
            raise EnrollmentNotFoundError(enrollment_id)
        return enrollment

    def list_enrollments(self, session_id: str, status: str | None = None) -> list[Enrollment]:
        sid = self._require_session(session_id)
        wanted = parse_status(status) if status else None
        return self._enrollments.list_enrollments(sid, wanted)

    def build_request(self, enrollment_ids: Iterable[str], target_status: str) -> TransitionRequest:
        """Parse raw IDs and a status name into a TransitionRequest.

        Raises:
            InvalidIdError: If any ID is not a valid UUID.
            ValidationError: If the status is unknown.
        """
        return TransitionRequest(
            enrollment_ids=frozenset(parse_id(EnrollmentId, raw) for raw in enrollment_ids),
            target_status=parse_status(target_status),
        )

    def bulk_transition(self, request: TransitionRequest) -> int:
        """Move every listed enrollment to the target status, or none of them.

        Returns the number of enrollments whose status changed. Enrollment
        ``created_at`` is never touched.

        Raises:
            EnrollmentNotFoundError: If any enrollment does not exist.
            CapacityExceededError: If admitting the batch would overfill a session.
        """
        if not request.enrollment_ids:
            return 0

        target = request.target_status

        def check(session, admitted_count, batch):
            return self._state_machine.check_batch(session, admitted_count, batch, target)

        try:
            updated = self._enrollments.apply_transition(request.enrollment_ids, target, check)
        except CapacityExceededError as e:
            logger.warning(
                "Rejected admission of %d enrollments session=%s available=%d",
                len(request.enrollment_ids),
                e.session_id,
                e.available,
            )
            raise

        logger.info(
            "Transitioned %d of %d enrollments to %s",
            updated,
            len(request.enrollment_ids),
            target.value,
        )
        return updated

    def roster_summary(self, session_id: str) -> RosterSummary:
        """Return enrollment counts per status for a session.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
        """
        sid = parse_id(SessionId, session_id)
        session = self._sessions.get_session(sid)
        if session is None:
            raise SessionNotFoundError(session_id)

        counts = {status: 0 for status in EnrollmentStatus}
        for enrollment in self._enrollments.list_enrollments(sid):
            counts[enrollment.status] += 1

        return RosterSummary(
            session_id=sid,
            capacity=session.capacity.value,
            waitlisted=counts[EnrollmentStatus.WAITLISTED],
            admitted=counts[EnrollmentStatus.ADMITTED],
            withdrawn=counts[EnrollmentStatus.WITHDRAWN],
        )
