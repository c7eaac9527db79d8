"""Which occurrence dates an enrollment may have attendance recorded for.

An enrollment is eligible from the calendar date of its ``created_at``
onwards. Its current status plays no part.
"""

from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from roster.domain.models import Enrollment, Occurrence, Session
from roster.domain.occurrences import OccurrenceGenerator


def normalize(value: date | datetime, tz: tzinfo | None = None) -> date:
    """Truncate to a calendar date, converting aware datetimes to ``tz`` first."""
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


class AttendanceEligibilityResolver:
    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def admission_date(self, enrollment: Enrollment) -> date:
        return normalize(enrollment.created_at, self._tz)

    def is_eligible(self, enrollment: Enrollment, occurrence_date: date | datetime) -> bool:
        return normalize(occurrence_date, self._tz) >= self.admission_date(enrollment)

    def filter_dates(self, enrollment: Enrollment, dates: Iterable[date]) -> list[date]:
        return [d for d in dates if self.is_eligible(enrollment, d)]

    def eligible_occurrences(
        self,
        enrollment: Enrollment,
        occurrences: Iterable[Occurrence],
    ) -> list[Occurrence]:
        return [o for o in occurrences if self.is_eligible(enrollment, o.date)]


def eligible_occurrences(
    enrollment: Enrollment,
    session: Session,
    tz: tzinfo | None = None,
) -> list[date]:
    """Return the dates of ``session`` that ``enrollment`` is eligible for."""
    occurrences = OccurrenceGenerator().generate(session)
    resolver = AttendanceEligibilityResolver(tz)
    return [o.date for o in resolver.eligible_occurrences(enrollment, occurrences)]
