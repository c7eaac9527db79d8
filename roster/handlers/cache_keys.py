"""Cache keys shared by handlers and invalidation signals."""

from uuid import UUID


def _canonical(value) -> str:
    try:
        return str(UUID(str(value)))
    except ValueError:
        return str(value)


def session_occurrences(session_id) -> str:
    return f"sessions:{_canonical(session_id)}:occurrences"
