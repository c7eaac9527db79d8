"""Django ORM implementations of the roster stores.

Each method queries the ORM and converts rows to domain models.
"""

import logging
from collections.abc import Iterable, Sequence

from django.db import IntegrityError, transaction
from django.utils import timezone

from roster import models
from roster.domain import (
    AttendanceRecord,
    Capacity,
    Enrollment,
    EnrollmentId,
    EnrollmentStatus,
    Session,
    SessionId,
    Term,
    TermId,
    Weekday,
)
from roster.domain.errors import EnrollmentNotFoundError, ValidationError
from roster.stores.interfaces import (
    AttendanceStore,
    EnrollmentStore,
    SessionStore,
    TermStore,
    TransitionCheck,
)

logger = logging.getLogger(__name__)


def _term_to_domain(row: models.Term) -> Term:
    return Term(
        id=TermId(row.id),
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
        year=row.year,
    )


def _session_to_domain(row: models.Session) -> Session:
    links = models.SessionTerm.objects.filter(session_id=row.id).select_related("term")
    return Session(
        id=SessionId(row.id),
        title=row.title,
        weekday=Weekday(row.weekday),
        start_time=row.start_time,
        end_time=row.end_time,
        capacity=Capacity(row.capacity),
        min_age=row.min_age,
        max_age=row.max_age,
        terms=tuple(_term_to_domain(link.term) for link in links),
        location=row.location,
    )


def _enrollment_to_domain(row: models.Enrollment) -> Enrollment:
    return Enrollment(
        id=EnrollmentId(row.id),
        session_id=SessionId(row.session_id),
        participant_id=row.participant_id,
        status=EnrollmentStatus(row.status),
        created_at=row.created_at,
    )


def _record_to_domain(row: models.AttendanceRecord) -> AttendanceRecord:
    return AttendanceRecord(
        session_id=SessionId(row.session_id),
        enrollment_id=EnrollmentId(row.enrollment_id),
        occurrence_date=row.occurrence_date,
        present=row.present,
    )


class DjangoTermStore(TermStore):
    """Term store backed by the Django ORM."""

    def list_terms(self) -> list[Term]:
        return [_term_to_domain(row) for row in models.Term.objects.order_by("start_date")]

    def get_term(self, term_id: TermId) -> Term | None:
        row = models.Term.objects.filter(id=term_id.value).first()
        return _term_to_domain(row) if row else None


class DjangoSessionStore(SessionStore):
    """Session store backed by the Django ORM."""

    def get_session(self, session_id: SessionId) -> Session | None:
        row = models.Session.objects.filter(id=session_id.value).first()
        return _session_to_domain(row) if row else None


class DjangoEnrollmentStore(EnrollmentStore):
    """Enrollment store backed by the Django ORM.

    Admissions are serialized on the session row: ``apply_transition`` locks
    every affected session with ``SELECT ... FOR UPDATE`` before counting.
    """

    def list_enrollments(
        self,
        session_id: SessionId,
        status: EnrollmentStatus | None = None,
    ) -> list[Enrollment]:
        qs = models.Enrollment.objects.filter(session_id=session_id.value)
        if status is not None:
            qs = qs.filter(status=status.value)
        return [_enrollment_to_domain(row) for row in qs.order_by("created_at", "id")]

    def get_enrollment(self, enrollment_id: EnrollmentId) -> Enrollment | None:
        row = models.Enrollment.objects.filter(id=enrollment_id.value).first()
        return _enrollment_to_domain(row) if row else None

    def get_enrollments(self, enrollment_ids: Iterable[EnrollmentId]) -> list[Enrollment]:
        ids = [eid.value for eid in enrollment_ids]
        return [_enrollment_to_domain(row) for row in models.Enrollment.objects.filter(id__in=ids)]

    def count_admitted(self, session_id: SessionId) -> int:
        return models.Enrollment.objects.filter(
            session_id=session_id.value,
            status=EnrollmentStatus.ADMITTED.value,
        ).count()

    def create_enrollment(self, session_id: SessionId, participant_id: str) -> Enrollment:
        try:
            with transaction.atomic():
                row = models.Enrollment.objects.create(
                    session_id=session_id.value,
                    participant_id=participant_id,
                    status=EnrollmentStatus.WAITLISTED.value,
                )
        except IntegrityError as e:
            raise ValidationError(
                {"participant_id": "Participant is already enrolled in this session"}
            ) from e
        return _enrollment_to_domain(row)

    def apply_transition(
        self,
        enrollment_ids: frozenset[EnrollmentId],
        target_status: EnrollmentStatus,
        check: TransitionCheck,
    ) -> int:
        ids = [eid.value for eid in enrollment_ids]

        with transaction.atomic():
            rows = list(models.Enrollment.objects.filter(id__in=ids))
            found = {row.id for row in rows}
            missing = [str(i) for i in ids if i not in found]
            if missing:
                raise EnrollmentNotFoundError(*missing)

            # Fixed lock order keeps concurrent batches from deadlocking.
            session_ids = sorted({row.session_id for row in rows})
            locked = list(
                models.Session.objects.select_for_update().filter(id__in=session_ids).order_by("id")
            )

            # Re-read under the lock so the check sees committed statuses.
            rows = list(models.Enrollment.objects.filter(id__in=ids))

            changing: list[Enrollment] = []
            for session_row in locked:
                session = _session_to_domain(session_row)
                batch = [_enrollment_to_domain(r) for r in rows if r.session_id == session_row.id]
                admitted = self.count_admitted(session.id)
                changing.extend(check(session, admitted, batch))

            if changing:
                models.Enrollment.objects.filter(id__in=[e.id.value for e in changing]).update(
                    status=target_status.value,
                    updated_at=timezone.now(),
                )

        logger.debug(
            "Applied transition to %s for %d of %d enrollments",
            target_status.value,
            len(changing),
            len(ids),
        )
        return len(changing)


class DjangoAttendanceStore(AttendanceStore):
    """Attendance store backed by the Django ORM."""

    def list_records(self, session_id: SessionId) -> list[AttendanceRecord]:
        qs = models.AttendanceRecord.objects.filter(session_id=session_id.value)
        return [_record_to_domain(row) for row in qs]

    def list_records_for_enrollment(self, enrollment_id: EnrollmentId) -> list[AttendanceRecord]:
        qs = models.AttendanceRecord.objects.filter(enrollment_id=enrollment_id.value)
        return [_record_to_domain(row) for row in qs]

    def save_records(self, records: Sequence[AttendanceRecord]) -> int:
        with transaction.atomic():
            for record in records:
                models.AttendanceRecord.objects.update_or_create(
                    enrollment_id=record.enrollment_id.value,
                    occurrence_date=record.occurrence_date,
                    defaults={
                        "session_id": record.session_id.value,
                        "present": record.present,
                    },
                )
        return len(records)
