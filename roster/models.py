"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from roster.domain.errors import ValidationError
from roster.domain.validation import validate_session, validate_term
from roster.domain.value_objects import EnrollmentStatus, Weekday


class Term(models.Model):
    """Persistence model for terms."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    start_date = models.DateField()
    end_date = models.DateField()
    year = models.PositiveSmallIntegerField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_date__lte=F("end_date")),
                name="term_start_on_or_before_end",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} {self.year}"

    def clean(self) -> None:
        if self.start_date is None or self.end_date is None:
            return
        try:
            validate_term(name=self.name, start_date=self.start_date, end_date=self.end_date)
        except ValidationError as e:
            raise DjangoValidationError(e.errors) from e

    def save(self, *args, **kwargs) -> None:
        if self.year is None and self.start_date is not None:
            self.year = self.start_date.year
        super().save(*args, **kwargs)


class Session(models.Model):
    """Persistence model for recurring weekly sessions."""

    WEEKDAY_CHOICES = [(day.value, day.name.title()) for day in Weekday]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True)
    weekday = models.PositiveSmallIntegerField(choices=WEEKDAY_CHOICES)
    start_time = models.TimeField()
    end_time = models.TimeField()
    capacity = models.PositiveIntegerField()
    min_age = models.PositiveSmallIntegerField()
    max_age = models.PositiveSmallIntegerField()
    terms = models.ManyToManyField(Term, through="SessionTerm", related_name="sessions")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["weekday", "start_time"]
        constraints = [
            models.CheckConstraint(
                condition=Q(capacity__gte=1),
                name="session_capacity_positive",
            ),
            models.CheckConstraint(
                condition=Q(min_age__lt=F("max_age")),
                name="session_min_age_below_max_age",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.get_weekday_display()})"

    def clean(self) -> None:
        required = (self.weekday, self.start_time, self.end_time, self.capacity, self.min_age, self.max_age)
        if any(value is None for value in required):
            return
        try:
            validate_session(
                title=self.title,
                weekday=self.weekday,
                start_time=self.start_time,
                end_time=self.end_time,
                capacity=self.capacity,
                min_age=self.min_age,
                max_age=self.max_age,
            )
        except ValidationError as e:
            raise DjangoValidationError(e.errors) from e


class SessionTerm(models.Model):
    """Ordered link between a session and one of its terms."""

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="session_terms")
    term = models.ForeignKey(Term, on_delete=models.PROTECT, related_name="session_terms")
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        constraints = [
            models.UniqueConstraint(fields=["session", "term"], name="unique_term_per_session"),
        ]

    def __str__(self) -> str:
        return f"{self.session.title} - {self.term.name}"


class Enrollment(models.Model):
    """Persistence model for a participant's enrollment in a session."""

    STATUS_CHOICES = [(status.value, status.name.title()) for status in EnrollmentStatus]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="enrollments")
    participant_id = models.CharField(max_length=64)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=EnrollmentStatus.WAITLISTED.value,
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "participant_id"],
                name="unique_enrollment_per_session",
            ),
        ]
        indexes = [
            models.Index(fields=["session", "status"], name="enrollment_session_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.participant_id} -> {self.session.title} ({self.status})"


class AttendanceRecord(models.Model):
    """Persistence model for presence on one occurrence date."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="attendance_records")
    enrollment = models.ForeignKey(
        Enrollment, on_delete=models.CASCADE, related_name="attendance_records"
    )
    occurrence_date = models.DateField()
    present = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["occurrence_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["enrollment", "occurrence_date"],
                name="unique_attendance_per_enrollment_date",
            ),
        ]
        indexes = [
            models.Index(fields=["session", "occurrence_date"], name="attendance_session_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.enrollment_id} {self.occurrence_date} {'present' if self.present else 'absent'}"
