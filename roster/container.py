from dataclasses import dataclass
from functools import cache

from django.utils import timezone

from roster.services import AttendanceService, EnrollmentService, ScheduleService
from roster.stores.django_store import (
    DjangoAttendanceStore,
    DjangoEnrollmentStore,
    DjangoSessionStore,
    DjangoTermStore,
)


@dataclass(frozen=True)
class Container:
    terms: DjangoTermStore
    sessions: DjangoSessionStore
    enrollments: DjangoEnrollmentStore
    attendance: DjangoAttendanceStore

    schedule_service: ScheduleService
    enrollment_service: EnrollmentService
    attendance_service: AttendanceService


def build_container() -> Container:
    """Wire the services to the Django ORM stores."""
    terms = DjangoTermStore()
    sessions = DjangoSessionStore()
    enrollments = DjangoEnrollmentStore()
    attendance = DjangoAttendanceStore()

    return Container(
        terms=terms,
        sessions=sessions,
        enrollments=enrollments,
        attendance=attendance,
        schedule_service=ScheduleService(terms, sessions),
        enrollment_service=EnrollmentService(sessions, enrollments),
        attendance_service=AttendanceService(
            sessions,
            enrollments,
            attendance,
            tz=timezone.get_default_timezone(),
        ),
    )


@cache
def get_container() -> Container:
    """Return the process-wide container, building it on first use."""
    return build_container()
