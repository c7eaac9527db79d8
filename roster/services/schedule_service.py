"""Schedule service - terms, sessions, and their derived occurrences.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from roster.domain import Occurrence, Session, SessionId, Term, TermId, TermOccurrences
from roster.domain.errors import SessionNotFoundError, TermNotFoundError
from roster.domain.occurrences import OccurrenceGenerator
from roster.services.ids import parse_id
from roster.stores.interfaces import SessionStore, TermStore


class ScheduleService:
    """Service for term lookups and occurrence generation."""

    def __init__(
        self,
        terms: TermStore,
        sessions: SessionStore,
        generator: OccurrenceGenerator | None = None,
    ) -> None:
        self._terms = terms
        self._sessions = sessions
        self._generator = generator or OccurrenceGenerator()

    def list_terms(self) -> list[Term]:
        """Return all terms."""
        return self._terms.list_terms()

    def get_term(self, term_id: str) -> Term:
        """Return a term by ID.

        Raises:
            InvalidIdError: If the term_id is not a valid UUID.
            TermNotFoundError: If the term does not exist.
        """
        term = self._terms.get_term(parse_id(TermId, term_id))
        if term is None:
            raise TermNotFoundError(term_id)
        return term

    def get_session(self, session_id: str) -> Session:
        """Return a session with its terms.

        Raises:
            InvalidIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
        """
        session = self._sessions.get_session(parse_id(SessionId, session_id))
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def generate_occurrences(self, session_id: str) -> list[Occurrence]:
        """Return every occurrence of a session, grouped by term in term order."""
        return self._generator.generate(self.get_session(session_id))

    def occurrences_by_term(self, session_id: str) -> list[TermOccurrences]:
        return self._generator.by_term(self.get_session(session_id))
