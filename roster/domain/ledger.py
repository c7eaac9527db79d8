"""Attendance ledger rules: which writes are accepted and how stats add up."""

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from roster.domain.eligibility import AttendanceEligibilityResolver
from roster.domain.models import (
    AttendanceEntry,
    AttendanceRecord,
    AttendanceStats,
    Enrollment,
    IneligibilityReason,
    IneligibleRecord,
    Session,
)
from roster.domain.occurrences import OccurrenceGenerator
from roster.domain.value_objects import EnrollmentId

logger = logging.getLogger(__name__)


def percent_of(present: int, total: int) -> int:
    """Whole-number percentage, rounding halves up. Zero when ``total`` is zero."""
    if total == 0:
        return 0
    ratio = Decimal(present) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class AttendanceLedger:
    def __init__(
        self,
        generator: OccurrenceGenerator | None = None,
        resolver: AttendanceEligibilityResolver | None = None,
    ) -> None:
        self._generator = generator or OccurrenceGenerator()
        self._resolver = resolver or AttendanceEligibilityResolver()

    def screen(
        self,
        session: Session,
        enrollments: Mapping[EnrollmentId, Enrollment],
        entries: Iterable[AttendanceEntry],
    ) -> tuple[list[AttendanceRecord], list[IneligibleRecord]]:
        """Split incoming writes into storable records and rejected ones.

        A later entry for the same (enrollment, date) replaces an earlier one.
        """
        session_dates = {o.date for o in self._generator.generate(session)}
        accepted: dict[tuple[EnrollmentId, date], AttendanceRecord] = {}
        rejected: list[IneligibleRecord] = []

        for entry in entries:
            enrollment = enrollments.get(entry.enrollment_id)
            if enrollment is None or enrollment.session_id != session.id:
                reason = IneligibilityReason.UNKNOWN_ENROLLMENT
            elif entry.occurrence_date not in session_dates:
                reason = IneligibilityReason.NOT_AN_OCCURRENCE
            elif not self._resolver.is_eligible(enrollment, entry.occurrence_date):
                reason = IneligibilityReason.BEFORE_ADMISSION
            else:
                accepted[(entry.enrollment_id, entry.occurrence_date)] = AttendanceRecord(
                    session_id=session.id,
                    enrollment_id=entry.enrollment_id,
                    occurrence_date=entry.occurrence_date,
                    present=entry.present,
                )
                continue

            logger.debug(
                "Dropping attendance enrollment=%s date=%s reason=%s",
                entry.enrollment_id,
                entry.occurrence_date,
                reason.value,
            )
            rejected.append(
                IneligibleRecord(
                    enrollment_id=entry.enrollment_id,
                    occurrence_date=entry.occurrence_date,
                    reason=reason,
                )
            )

        return list(accepted.values()), rejected

    def stats(
        self,
        session: Session,
        enrollment: Enrollment,
        records: Iterable[AttendanceRecord],
    ) -> AttendanceStats:
        """Presence over the enrollment's eligible occurrence dates.

        A date with no stored record counts as absent.
        """
        dates = [o.date for o in self._generator.generate(session)]
        eligible = set(self._resolver.filter_dates(enrollment, dates))
        attended = {
            r.occurrence_date
            for r in records
            if r.enrollment_id == enrollment.id and r.present
        }
        present = len(eligible & attended)
        total = len(eligible)
        return AttendanceStats(present=present, total=total, percent=percent_of(present, total))
