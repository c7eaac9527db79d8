"""Term date windows for a session."""

from roster.domain.models import Session
from roster.domain.value_objects import TermWindow


class TermCalendar:
    """Exposes the date windows of a session's terms."""

    def windows_for(self, session: Session) -> list[TermWindow]:
        """Return one window per term, in the session's own term order."""
        return [term.window for term in session.terms]
