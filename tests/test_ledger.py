"""Unit tests for AttendanceLedger screening and stats.

Run with: pytest tests/test_ledger.py -v
"""

import logging
from datetime import date

from conftest import at, make_enrollment, make_session, make_term

from roster.domain import AttendanceEntry, AttendanceRecord, Weekday
from roster.domain.ledger import AttendanceLedger
from roster.domain.models import IneligibilityReason


class TestScreen:
    """Tests for splitting attendance writes into accepted and rejected."""

    def setup_method(self):
        # Mondays: Feb 3, 10, 17, 24
        self.session = make_session(make_term(date(2025, 2, 1), date(2025, 3, 1)), weekday=Weekday.MONDAY)
        self.enrollment = make_enrollment(self.session, at(date(2025, 2, 10)))
        self.enrollments = {self.enrollment.id: self.enrollment}
        self.ledger = AttendanceLedger()

    def entry(self, day: date, present: bool = True, enrollment=None) -> AttendanceEntry:
        enrollment = enrollment or self.enrollment
        return AttendanceEntry(enrollment_id=enrollment.id, occurrence_date=day, present=present)

    def test_accepts_eligible_occurrence(self):
        """Given an occurrence after admission, the write becomes a record."""
        accepted, rejected = self.ledger.screen(self.session, self.enrollments, [self.entry(date(2025, 2, 17))])

        assert accepted == [
            AttendanceRecord(
                session_id=self.session.id,
                enrollment_id=self.enrollment.id,
                occurrence_date=date(2025, 2, 17),
                present=True,
            )
        ]
        assert rejected == []

    def test_rejects_occurrence_before_admission(self):
        """Given created_at 2025-02-10, a write for 2025-02-03 is rejected."""
        accepted, rejected = self.ledger.screen(self.session, self.enrollments, [self.entry(date(2025, 2, 3))])

        assert accepted == []
        assert [r.reason for r in rejected] == [IneligibilityReason.BEFORE_ADMISSION]

    def test_rejects_date_that_is_not_an_occurrence(self):
        """A Tuesday is never a Monday session occurrence."""
        _, rejected = self.ledger.screen(self.session, self.enrollments, [self.entry(date(2025, 2, 18))])
        assert [r.reason for r in rejected] == [IneligibilityReason.NOT_AN_OCCURRENCE]

    def test_rejects_date_outside_every_term(self):
        """Given a Monday after the term ends, the write is rejected."""
        _, rejected = self.ledger.screen(self.session, self.enrollments, [self.entry(date(2025, 3, 3))])
        assert [r.reason for r in rejected] == [IneligibilityReason.NOT_AN_OCCURRENCE]

    def test_rejects_unknown_enrollment(self):
        """Given an enrollment the ledger was not told about, the write is rejected."""
        stranger = make_enrollment(self.session, at(date(2025, 2, 1)))
        _, rejected = self.ledger.screen(
            self.session, self.enrollments, [self.entry(date(2025, 2, 17), enrollment=stranger)]
        )
        assert [r.reason for r in rejected] == [IneligibilityReason.UNKNOWN_ENROLLMENT]

    def test_rejects_enrollment_from_another_session(self):
        """Given an enrollment of a different session, the write is rejected."""
        other_session = make_session(make_term(date(2025, 2, 1), date(2025, 3, 1)), weekday=Weekday.MONDAY)
        outsider = make_enrollment(other_session, at(date(2025, 2, 1)))
        enrollments = {**self.enrollments, outsider.id: outsider}

        _, rejected = self.ledger.screen(
            self.session, enrollments, [self.entry(date(2025, 2, 17), enrollment=outsider)]
        )

        assert [r.reason for r in rejected] == [IneligibilityReason.UNKNOWN_ENROLLMENT]

    def test_last_entry_for_same_date_wins(self):
        """Given two writes for one date, only the later one is kept."""
        entries = [self.entry(date(2025, 2, 17), True), self.entry(date(2025, 2, 17), False)]

        accepted, _ = self.ledger.screen(self.session, self.enrollments, entries)

        assert len(accepted) == 1
        assert accepted[0].present is False

    def test_rejection_does_not_block_the_rest(self):
        """Given one ineligible write among three, the other two are accepted."""
        entries = [self.entry(date(2025, 2, 3)), self.entry(date(2025, 2, 10)), self.entry(date(2025, 2, 24))]

        accepted, rejected = self.ledger.screen(self.session, self.enrollments, entries)

        assert [r.occurrence_date for r in accepted] == [date(2025, 2, 10), date(2025, 2, 24)]
        assert len(rejected) == 1

    def test_dropped_record_is_logged(self, caplog):
        """Given a rejected write, its reason is logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="roster.domain.ledger"):
            self.ledger.screen(self.session, self.enrollments, [self.entry(date(2025, 2, 3))])
        assert "BEFORE_ADMISSION" in caplog.text


class TestStats:
    """Tests for presence totals over eligible occurrences."""

    def setup_method(self):
        self.session = make_session(make_term(date(2025, 2, 1), date(2025, 3, 1)), weekday=Weekday.MONDAY)
        self.ledger = AttendanceLedger()

    def record(self, enrollment, day: date, present: bool = True) -> AttendanceRecord:
        return AttendanceRecord(
            session_id=self.session.id,
            enrollment_id=enrollment.id,
            occurrence_date=day,
            present=present,
        )

    def test_denominator_excludes_dates_before_admission(self):
        """Given created_at 2025-02-10, only 3 of 4 Mondays count."""
        enrollment = make_enrollment(self.session, at(date(2025, 2, 10)))
        records = [self.record(enrollment, date(2025, 2, 10)), self.record(enrollment, date(2025, 2, 17))]

        stats = self.ledger.stats(self.session, enrollment, records)

        assert (stats.present, stats.total, stats.percent) == (2, 3, 67)

    def test_missing_record_counts_as_absent(self):
        """Given one record over four eligible dates, attendance is 25%."""
        enrollment = make_enrollment(self.session, at(date(2025, 1, 1)))

        stats = self.ledger.stats(self.session, enrollment, [self.record(enrollment, date(2025, 2, 3))])

        assert (stats.present, stats.total, stats.percent) == (1, 4, 25)

    def test_absent_records_are_not_present(self):
        """Given only absent records, present is 0."""
        enrollment = make_enrollment(self.session, at(date(2025, 1, 1)))
        records = [self.record(enrollment, d, present=False) for d in (date(2025, 2, 3), date(2025, 2, 10))]

        assert self.ledger.stats(self.session, enrollment, records).present == 0

    def test_no_eligible_occurrences_is_zero_not_error(self):
        """An enrollment created after the last occurrence has total 0 and percent 0."""
        enrollment = make_enrollment(self.session, at(date(2025, 6, 1)))

        stats = self.ledger.stats(self.session, enrollment, [])

        assert (stats.present, stats.total, stats.percent) == (0, 0, 0)

    def test_present_never_exceeds_total(self):
        """Records before admission or off-schedule are ignored."""
        enrollment = make_enrollment(self.session, at(date(2025, 2, 24)))
        records = [
            self.record(enrollment, date(2025, 2, 3)),
            self.record(enrollment, date(2025, 2, 18)),
            self.record(enrollment, date(2025, 2, 24)),
        ]

        stats = self.ledger.stats(self.session, enrollment, records)

        assert (stats.present, stats.total, stats.percent) == (1, 1, 100)
