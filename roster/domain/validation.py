"""Input rules for Terms and Sessions.

Malformed terms and sessions are rejected here, before they can reach the
occurrence generator.
"""

from datetime import date, time

from roster.domain.errors import ValidationError

MAX_SESSION_CAPACITY = 200
MIN_AGE_LIMIT = 0
MAX_AGE_LIMIT = 100


def validate_term(*, name: str, start_date: date, end_date: date) -> None:
    """Raise ValidationError if the term cannot be scheduled against."""
    errors: dict[str, str] = {}

    if not name or not name.strip():
        errors["name"] = "Name is required"
    if end_date < start_date:
        errors["end_date"] = "End date must be on or after start date"

    if errors:
        raise ValidationError(errors)


def validate_session(
    *,
    title: str,
    weekday: int,
    start_time: time,
    end_time: time,
    capacity: int,
    min_age: int,
    max_age: int,
) -> None:
    """Raise ValidationError listing every rule the session breaks."""
    errors: dict[str, str] = {}

    if not title or not title.strip():
        errors["title"] = "Title is required"
    if not 0 <= weekday <= 6:
        errors["weekday"] = "Weekday must be between 0 (Monday) and 6 (Sunday)"
    if end_time <= start_time:
        errors["end_time"] = "End time must be after start time"
    if not 1 <= capacity <= MAX_SESSION_CAPACITY:
        errors["capacity"] = f"Capacity must be between 1 and {MAX_SESSION_CAPACITY}"
    if not MIN_AGE_LIMIT <= min_age <= MAX_AGE_LIMIT:
        errors["min_age"] = f"Minimum age must be between {MIN_AGE_LIMIT} and {MAX_AGE_LIMIT}"
    if not MIN_AGE_LIMIT <= max_age <= MAX_AGE_LIMIT:
        errors["max_age"] = f"Maximum age must be between {MIN_AGE_LIMIT} and {MAX_AGE_LIMIT}"
    elif min_age >= max_age:
        errors["max_age"] = "Maximum age must be greater than minimum age"

    if errors:
        raise ValidationError(errors)
