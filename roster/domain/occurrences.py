"""Weekly occurrence derivation bounded by term windows.

Dates carry no time zone and every step is a whole number of days, so
daylight-saving changes cannot shift an occurrence.
"""

from collections.abc import Iterator
from datetime import date, timedelta

from roster.domain.calendar import TermCalendar
from roster.domain.models import Occurrence, Session, TermOccurrences
from roster.domain.value_objects import TermWindow

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)


def first_weekday_on_or_after(start: date, weekday: int, end: date) -> date | None:
    """Return the first date in ``start..end`` falling on ``weekday``."""
    for offset in range(7):
        candidate = start + offset * ONE_DAY
        if candidate > end:
            return None
        if candidate.weekday() == weekday:
            return candidate
    return None


def weekly_dates(window: TermWindow, weekday: int) -> Iterator[date]:
    """Yield every ``weekday`` inside the window, oldest first."""
    if window.is_empty:
        return
    first = first_weekday_on_or_after(window.start, weekday, window.end)
    if first is None:
        return
    weeks = (window.end - first).days // 7
    for week in range(weeks + 1):
        yield first + week * ONE_WEEK


class OccurrenceGenerator:
    """Produces the concrete dates a session runs on.

    Results are concatenated per term window in the session's term order and
    are never re-sorted globally.
    """

    def __init__(self, calendar: TermCalendar | None = None) -> None:
        self._calendar = calendar or TermCalendar()

    def for_window(self, session: Session, window: TermWindow) -> list[Occurrence]:
        return [
            Occurrence(
                session_id=session.id,
                date=day,
                start_time=session.start_time,
                end_time=session.end_time,
            )
            for day in weekly_dates(window, session.weekday)
        ]

    def generate(self, session: Session) -> list[Occurrence]:
        occurrences: list[Occurrence] = []
        for window in self._calendar.windows_for(session):
            occurrences.extend(self.for_window(session, window))
        return occurrences

    def by_term(self, session: Session) -> list[TermOccurrences]:
        return [
            TermOccurrences(
                term=term,
                occurrences=tuple(self.for_window(session, window)),
            )
            for term, window in zip(session.terms, self._calendar.windows_for(session))
        ]


def generate_occurrences(session: Session) -> list[Occurrence]:
    return OccurrenceGenerator().generate(session)
