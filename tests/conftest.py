"""Pytest configuration and shared fixtures."""

import uuid
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timezone

import pytest
from rest_framework.test import APIClient

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


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def admin_api_client(admin_user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


# --------------------------------------------------
# Domain builders
# --------------------------------------------------


def make_term(start: date, end: date, name: str = "Term") -> Term:
    return Term(id=TermId(uuid.uuid4()), name=name, start_date=start, end_date=end, year=start.year)


def make_session(
    *terms: Term,
    weekday: Weekday = Weekday.WEDNESDAY,
    capacity: int = 20,
) -> Session:
    return Session(
        id=SessionId(uuid.uuid4()),
        title="Code Club",
        weekday=weekday,
        start_time=time(15, 30),
        end_time=time(17, 0),
        capacity=Capacity(capacity),
        min_age=8,
        max_age=14,
        terms=tuple(terms),
    )


def make_enrollment(
    session: Session,
    created_at: datetime,
    status: EnrollmentStatus = EnrollmentStatus.WAITLISTED,
    participant_id: str | None = None,
) -> Enrollment:
    return Enrollment(
        id=EnrollmentId(uuid.uuid4()),
        session_id=session.id,
        participant_id=participant_id or uuid.uuid4().hex,
        status=status,
        created_at=created_at,
    )


def at(day: date, hour: int = 9) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


# --------------------------------------------------
# In-memory stores
# --------------------------------------------------


class InMemoryTermStore(TermStore):
    def __init__(self) -> None:
        self.terms: dict[TermId, Term] = {}

    def add(self, term: Term) -> Term:
        self.terms[term.id] = term
        return term

    def list_terms(self) -> list[Term]:
        return sorted(self.terms.values(), key=lambda t: t.start_date)

    def get_term(self, term_id: TermId) -> Term | None:
        return self.terms.get(term_id)


class InMemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self.sessions: dict[SessionId, Session] = {}

    def add(self, session: Session) -> Session:
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: SessionId) -> Session | None:
        return self.sessions.get(session_id)


class InMemoryEnrollmentStore(EnrollmentStore):
    def __init__(self, sessions: InMemorySessionStore) -> None:
        self.sessions = sessions
        self.enrollments: dict[EnrollmentId, Enrollment] = {}
        self.transition_calls = 0

    def add(self, enrollment: Enrollment) -> Enrollment:
        self.enrollments[enrollment.id] = enrollment
        return enrollment

    def list_enrollments(
        self,
        session_id: SessionId,
        status: EnrollmentStatus | None = None,
    ) -> list[Enrollment]:
        found = [
            e
            for e in self.enrollments.values()
            if e.session_id == session_id and (status is None or e.status == status)
        ]
        return sorted(found, key=lambda e: e.created_at)

    def get_enrollment(self, enrollment_id: EnrollmentId) -> Enrollment | None:
        return self.enrollments.get(enrollment_id)

    def get_enrollments(self, enrollment_ids: Iterable[EnrollmentId]) -> list[Enrollment]:
        return [self.enrollments[i] for i in enrollment_ids if i in self.enrollments]

    def count_admitted(self, session_id: SessionId) -> int:
        return len(self.list_enrollments(session_id, EnrollmentStatus.ADMITTED))

    def create_enrollment(self, session_id: SessionId, participant_id: str) -> Enrollment:
        if any(
            e.session_id == session_id and e.participant_id == participant_id
            for e in self.enrollments.values()
        ):
            raise ValidationError({"participant_id": "Participant is already enrolled in this session"})
        return self.add(
            Enrollment(
                id=EnrollmentId(uuid.uuid4()),
                session_id=session_id,
                participant_id=participant_id,
                status=EnrollmentStatus.WAITLISTED,
                created_at=datetime.now(timezone.utc),
            )
        )

    def apply_transition(
        self,
        enrollment_ids: frozenset[EnrollmentId],
        target_status: EnrollmentStatus,
        check: TransitionCheck,
    ) -> int:
        self.transition_calls += 1
        missing = [str(i) for i in enrollment_ids if i not in self.enrollments]
        if missing:
            raise EnrollmentNotFoundError(*missing)

        batch = [self.enrollments[i] for i in enrollment_ids]
        changing: list[Enrollment] = []
        for session_id in sorted({e.session_id for e in batch}, key=str):
            session = self.sessions.get_session(session_id)
            members = [e for e in batch if e.session_id == session_id]
            changing.extend(check(session, self.count_admitted(session_id), members))

        for enrollment in changing:
            self.enrollments[enrollment.id] = Enrollment(
                id=enrollment.id,
                session_id=enrollment.session_id,
                participant_id=enrollment.participant_id,
                status=target_status,
                created_at=enrollment.created_at,
            )
        return len(changing)


class InMemoryAttendanceStore(AttendanceStore):
    def __init__(self) -> None:
        self.records: dict[tuple[EnrollmentId, date], AttendanceRecord] = {}

    def list_records(self, session_id: SessionId) -> list[AttendanceRecord]:
        return [r for r in self.records.values() if r.session_id == session_id]

    def list_records_for_enrollment(self, enrollment_id: EnrollmentId) -> list[AttendanceRecord]:
        return [r for r in self.records.values() if r.enrollment_id == enrollment_id]

    def save_records(self, records: Sequence[AttendanceRecord]) -> int:
        for record in records:
            self.records[(record.enrollment_id, record.occurrence_date)] = record
        return len(records)


@pytest.fixture
def term_store() -> InMemoryTermStore:
    return InMemoryTermStore()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def enrollment_store(session_store) -> InMemoryEnrollmentStore:
    return InMemoryEnrollmentStore(session_store)


@pytest.fixture
def attendance_store() -> InMemoryAttendanceStore:
    return InMemoryAttendanceStore()


# --------------------------------------------------
# ORM factories
# --------------------------------------------------


@pytest.fixture
def db_term(db):
    from roster import models

    def create(start: date, end: date, name: str = "Term 1"):
        return models.Term.objects.create(name=name, start_date=start, end_date=end)

    return create


@pytest.fixture
def db_session(db):
    from roster import models

    def create(*terms, weekday: int = Weekday.WEDNESDAY, capacity: int = 20, title: str = "Code Club"):
        session = models.Session.objects.create(
            title=title,
            weekday=int(weekday),
            start_time=time(15, 30),
            end_time=time(17, 0),
            capacity=capacity,
            min_age=8,
            max_age=14,
        )
        for position, term in enumerate(terms):
            models.SessionTerm.objects.create(session=session, term=term, position=position)
        return session

    return create


@pytest.fixture
def db_enrollment(db):
    from roster import models

    def create(session, created_at: datetime, status: EnrollmentStatus = EnrollmentStatus.WAITLISTED):
        return models.Enrollment.objects.create(
            session=session,
            participant_id=uuid.uuid4().hex,
            status=status.value,
            created_at=created_at,
        )

    return create
