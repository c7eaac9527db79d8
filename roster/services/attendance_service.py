"""Attendance service - eligibility, bulk saves, stats, and the attendance sheet."""

import logging
from collections.abc import Iterable
from datetime import date, tzinfo

from roster.domain import (
    AttendanceEntry,
    AttendanceSheet,
    AttendanceStats,
    Enrollment,
    EnrollmentId,
    EnrollmentStatus,
    SaveResult,
    Session,
    SessionId,
)
from roster.domain.eligibility import AttendanceEligibilityResolver
from roster.domain.errors import EnrollmentNotFoundError, SessionNotFoundError
from roster.domain.ledger import AttendanceLedger
from roster.domain.models import SheetCell, SheetRow
from roster.domain.occurrences import OccurrenceGenerator
from roster.services.ids import parse_id
from roster.stores.interfaces import AttendanceStore, EnrollmentStore, SessionStore

logger = logging.getLogger(__name__)


class AttendanceService:
    """Service for the attendance ledger.

    ``tz`` is the zone used to turn an enrollment's ``created_at`` into a
    calendar date.
    """

    def __init__(
        self,
        sessions: SessionStore,
        enrollments: EnrollmentStore,
        attendance: AttendanceStore,
        generator: OccurrenceGenerator | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._sessions = sessions
        self._enrollments = enrollments
        self._attendance = attendance
        self._generator = generator or OccurrenceGenerator()
        self._resolver = AttendanceEligibilityResolver(tz)
        self._ledger = AttendanceLedger(self._generator, self._resolver)

    def _get_session(self, session_id: SessionId, raw_id: str) -> Session:
        session = self._sessions.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(raw_id)
        return session

    def _get_enrollment_and_session(self, enrollment_id: str) -> tuple[Enrollment, Session]:
        enrollment = self._enrollments.get_enrollment(parse_id(EnrollmentId, enrollment_id))
        if enrollment is None:
            raise EnrollmentNotFoundError(enrollment_id)
        return enrollment, self._get_session(enrollment.session_id, str(enrollment.session_id))

    def eligible_occurrences(self, enrollment_id: str) -> list[date]:
        """Return the session dates on which attendance may be recorded.

        Raises:
            InvalidIdError: If the enrollment_id is not a valid UUID.
            EnrollmentNotFoundError: If the enrollment does not exist.
        """
        enrollment, session = self._get_enrollment_and_session(enrollment_id)
        occurrences = self._generator.generate(session)
        return [o.date for o in self._resolver.eligible_occurrences(enrollment, occurrences)]

    def bulk_save(self, session_id: str, entries: Iterable[AttendanceEntry]) -> SaveResult:
        """Store presence for a session in one transaction.

        Ineligible entries are returned in ``SaveResult.rejected`` and do not
        stop the rest of the batch from being saved.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
        """
        sid = parse_id(SessionId, session_id)
        session = self._get_session(sid, session_id)
        entries = list(entries)

        known = self._enrollments.get_enrollments({entry.enrollment_id for entry in entries})
        accepted, rejected = self._ledger.screen(session, {e.id: e for e in known}, entries)

        saved = self._attendance.save_records(accepted) if accepted else 0

        if rejected:
            logger.warning(
                "Dropped %d ineligible attendance records session=%s",
                len(rejected),
                sid,
            )
        logger.info("Saved %d attendance records session=%s", saved, sid)
        return SaveResult(saved=saved, rejected=tuple(rejected))

    def stats_for(self, enrollment_id: str) -> AttendanceStats:
        """Return presence totals over the enrollment's eligible occurrences.

        Raises:
            InvalidIdError: If the enrollment_id is not a valid UUID.
            EnrollmentNotFoundError: If the enrollment does not exist.
        """
        enrollment, session = self._get_enrollment_and_session(enrollment_id)
        records = self._attendance.list_records_for_enrollment(enrollment.id)
        return self._ledger.stats(session, enrollment, records)

    def attendance_sheet(self, session_id: str) -> AttendanceSheet:
        """Build the attendance grid for the admitted enrollments of a session.

        Cells before an enrollment's admission date are marked non-editable.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
        """
        sid = parse_id(SessionId, session_id)
        session = self._get_session(sid, session_id)

        blocks = self._generator.by_term(session)
        dates = [o.date for block in blocks for o in block.occurrences]
        admitted = self._enrollments.list_enrollments(sid, EnrollmentStatus.ADMITTED)
        records = self._attendance.list_records(sid)
        presence = {(r.enrollment_id, r.occurrence_date): r.present for r in records}

        rows = []
        for enrollment in admitted:
            cells = tuple(
                SheetCell(
                    occurrence_date=day,
                    present=presence.get((enrollment.id, day), False),
                    editable=self._resolver.is_eligible(enrollment, day),
                )
                for day in dates
            )
            rows.append(
                SheetRow(
                    enrollment=enrollment,
                    cells=cells,
                    stats=self._ledger.stats(session, enrollment, records),
                )
            )

        return AttendanceSheet(session=session, terms=tuple(blocks), rows=tuple(rows))
