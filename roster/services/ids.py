from typing import TypeVar

from roster.domain.errors import InvalidIdError
from roster.domain.value_objects import EnrollmentId, SessionId, TermId

IdT = TypeVar("IdT", TermId, SessionId, EnrollmentId)


def parse_id(id_type: type[IdT], value: str) -> IdT:
    """Parse a raw identifier, raising InvalidIdError for malformed UUIDs."""
    try:
        return id_type.from_string(str(value))
    except ValueError:
        raise InvalidIdError() from None
