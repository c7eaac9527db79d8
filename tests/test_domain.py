"""Unit tests for domain primitives and validation rules.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

import uuid
from datetime import date, time

import pytest

from roster.domain import AttendanceStats, Capacity, EnrollmentStatus, RosterSummary, SessionId, TermWindow
from roster.domain.errors import CapacityExceededError, ErrorCode, ValidationError
from roster.domain.ledger import percent_of
from roster.domain.models import AttendanceBand
from roster.domain.validation import validate_session, validate_term


def valid_session_fields(**overrides) -> dict:
    fields = dict(
        title="Code Club",
        weekday=2,
        start_time=time(15, 30),
        end_time=time(17, 0),
        capacity=20,
        min_age=8,
        max_age=14,
    )
    fields.update(overrides)
    return fields


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        """Capacity can be created with positive value."""
        assert Capacity(20).value == 20

    def test_capacity_accepts_one(self):
        """Given a capacity of 1, the smallest session is allowed."""
        assert Capacity(1).value == 1

    def test_capacity_rejects_zero(self):
        """Given a capacity of 0, raises ValueError since nobody could be admitted."""
        with pytest.raises(ValueError):
            Capacity(0)

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-1)


class TestSessionId:
    """Tests for identifier value objects."""

    def test_from_string_valid_uuid(self):
        """SessionId.from_string parses valid UUID."""
        raw = uuid.uuid4()
        assert SessionId.from_string(str(raw)).value == raw

    def test_from_string_invalid_uuid(self):
        """SessionId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            SessionId.from_string("not-a-uuid")


class TestTermWindow:
    """Tests for TermWindow bounds."""

    def test_reversed_window_is_empty(self):
        """A window starting after it ends holds no days."""
        window = TermWindow(start=date(2025, 3, 1), end=date(2025, 2, 1))
        assert window.is_empty
        assert date(2025, 2, 15) not in window

    def test_bounds_are_inclusive(self):
        """Given 2025-01-06..2025-01-27, both ends are inside the window."""
        window = TermWindow(start=date(2025, 1, 6), end=date(2025, 1, 27))
        assert date(2025, 1, 6) in window
        assert date(2025, 1, 27) in window
        assert date(2025, 1, 28) not in window


class TestValidateTerm:
    """Tests for term validation rules."""

    def test_accepts_single_day_term(self):
        """Given start equal to end, the term is valid."""
        validate_term(name="Holiday", start_date=date(2025, 4, 1), end_date=date(2025, 4, 1))

    def test_rejects_end_before_start(self):
        """Given end before start, raises ValidationError naming end_date."""
        with pytest.raises(ValidationError) as exc:
            validate_term(name="Term 1", start_date=date(2025, 4, 1), end_date=date(2025, 3, 1))
        assert "end_date" in exc.value.errors
        assert exc.value.code == ErrorCode.VALIDATION_FAILED

    def test_rejects_blank_name(self):
        """Given a whitespace-only name, only the name is reported."""
        with pytest.raises(ValidationError) as exc:
            validate_term(name="  ", start_date=date(2025, 1, 1), end_date=date(2025, 2, 1))
        assert set(exc.value.errors) == {"name"}


class TestValidateSession:
    """Tests for session validation rules."""

    def test_accepts_valid_session(self):
        """Given sensible fields, no error is raised."""
        validate_session(**valid_session_fields())

    def test_rejects_min_age_not_below_max_age(self):
        """Given min_age == max_age, raises ValidationError on max_age."""
        with pytest.raises(ValidationError) as exc:
            validate_session(**valid_session_fields(min_age=10, max_age=10))
        assert "max_age" in exc.value.errors

    def test_rejects_zero_capacity(self):
        """Given capacity 0, raises ValidationError on capacity."""
        with pytest.raises(ValidationError) as exc:
            validate_session(**valid_session_fields(capacity=0))
        assert "capacity" in exc.value.errors

    def test_rejects_capacity_over_limit(self):
        """Given capacity 201, raises ValidationError on capacity."""
        with pytest.raises(ValidationError) as exc:
            validate_session(**valid_session_fields(capacity=201))
        assert "capacity" in exc.value.errors

    def test_rejects_end_time_not_after_start_time(self):
        """Given equal start and end times, raises ValidationError on end_time."""
        with pytest.raises(ValidationError) as exc:
            validate_session(**valid_session_fields(start_time=time(17, 0), end_time=time(17, 0)))
        assert "end_time" in exc.value.errors

    def test_collects_every_failure(self):
        """Given several broken fields, all are reported together."""
        with pytest.raises(ValidationError) as exc:
            validate_session(**valid_session_fields(title="", weekday=7, capacity=0))
        assert {"title", "weekday", "capacity"} <= set(exc.value.errors)


class TestPercentOf:
    """Tests for whole-number percentage rounding."""

    def test_zero_total_is_zero_percent(self):
        """No eligible occurrences never divides by zero."""
        assert percent_of(0, 0) == 0

    def test_rounds_half_up(self):
        """1 of 8 is 12.5%, reported as 13."""
        assert percent_of(1, 8) == 13

    def test_rounds_down_below_half(self):
        """1 of 3 is 33.3%, reported as 33."""
        assert percent_of(1, 3) == 33

    def test_full_attendance(self):
        """Given 7 of 7, reports 100."""
        assert percent_of(7, 7) == 100


class TestAttendanceStats:
    """Tests for attendance bands."""

    @pytest.mark.parametrize(
        ("percent", "band"),
        [(80, AttendanceBand.GOOD), (79, AttendanceBand.FAIR), (60, AttendanceBand.FAIR), (59, AttendanceBand.POOR)],
    )
    def test_band_thresholds(self, percent, band):
        """Given a percentage on either side of 80 and 60, the matching band is reported."""
        assert AttendanceStats(present=0, total=0, percent=percent).band == band


class TestRosterSummary:
    """Tests for roster counts."""

    def test_available_places(self):
        """Given 19 of 20 admitted, one place is available."""
        summary = RosterSummary(
            session_id=SessionId(uuid.uuid4()), capacity=20, waitlisted=4, admitted=19, withdrawn=2
        )
        assert summary.available == 1


class TestErrors:
    """Tests for domain errors."""

    def test_capacity_exceeded_carries_available(self):
        """CapacityExceededError exposes the places left and its code."""
        error = CapacityExceededError(session_id="s", available=1)
        assert error.available == 1
        assert error.code == ErrorCode.CAPACITY_EXCEEDED
        assert str(error).startswith("CAPACITY_EXCEEDED")

    def test_enrollment_status_values(self):
        """Statuses serialize to their lowercase names."""
        assert [s.value for s in EnrollmentStatus] == ["waitlisted", "admitted", "withdrawn"]
