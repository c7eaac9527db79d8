"""Serializers for transforming domain models to API responses and back."""

from rest_framework import serializers

from roster.domain import AttendanceEntry, EnrollmentId, EnrollmentStatus
from roster.domain.errors import ErrorCode


class TermSerializer(serializers.Serializer):
    """Serializer for Term domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    year = serializers.IntegerField()


class SessionSerializer(serializers.Serializer):
    """Serializer for Session domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    location = serializers.CharField()
    weekday = serializers.IntegerField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    capacity = serializers.IntegerField(source="capacity.value")
    min_age = serializers.IntegerField()
    max_age = serializers.IntegerField()
    terms = TermSerializer(many=True)


class OccurrenceSerializer(serializers.Serializer):
    """Serializer for Occurrence values.

    Start and end are wall-clock times with no zone attached.
    """

    session_id = serializers.UUIDField(source="session_id.value")
    date = serializers.DateField()
    starts_at = serializers.SerializerMethodField()
    ends_at = serializers.SerializerMethodField()

    def get_starts_at(self, obj) -> str:
        return obj.starts_at.isoformat()

    def get_ends_at(self, obj) -> str:
        return obj.ends_at.isoformat()


class TermOccurrencesSerializer(serializers.Serializer):
    term = TermSerializer()
    occurrences = OccurrenceSerializer(many=True)


class EnrollmentSerializer(serializers.Serializer):
    """Serializer for Enrollment domain model."""

    id = serializers.UUIDField(source="id.value")
    session_id = serializers.UUIDField(source="session_id.value")
    participant_id = serializers.CharField()
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()


class TransitionRequestSerializer(serializers.Serializer):
    """Input for a bulk status change. IDs are parsed by the service."""

    enrollment_ids = serializers.ListField(child=serializers.CharField(), allow_empty=True)
    target_status = serializers.ChoiceField(choices=[s.value for s in EnrollmentStatus])


class AttendanceEntrySerializer(serializers.Serializer):
    enrollment_id = serializers.UUIDField()
    occurrence_date = serializers.DateField()
    present = serializers.BooleanField()

    def to_entry(self, data: dict) -> AttendanceEntry:
        return AttendanceEntry(
            enrollment_id=EnrollmentId(data["enrollment_id"]),
            occurrence_date=data["occurrence_date"],
            present=data["present"],
        )


class BulkAttendanceSerializer(serializers.Serializer):
    records = AttendanceEntrySerializer(many=True, allow_empty=True)

    def entries(self) -> list[AttendanceEntry]:
        child = AttendanceEntrySerializer()
        return [child.to_entry(item) for item in self.validated_data["records"]]


class IneligibleRecordSerializer(serializers.Serializer):
    enrollment_id = serializers.UUIDField(source="enrollment_id.value")
    occurrence_date = serializers.DateField()
    reason = serializers.CharField(source="reason.value")
    code = serializers.SerializerMethodField()

    def get_code(self, obj) -> str:
        return ErrorCode.INELIGIBLE_RECORD.value


class SaveResultSerializer(serializers.Serializer):
    saved = serializers.IntegerField()
    rejected = IneligibleRecordSerializer(many=True)


class AttendanceStatsSerializer(serializers.Serializer):
    present = serializers.IntegerField()
    total = serializers.IntegerField()
    percent = serializers.IntegerField()
    band = serializers.CharField(source="band.value")


class RosterSummarySerializer(serializers.Serializer):
    session_id = serializers.UUIDField(source="session_id.value")
    capacity = serializers.IntegerField()
    waitlisted = serializers.IntegerField()
    admitted = serializers.IntegerField()
    withdrawn = serializers.IntegerField()
    available = serializers.IntegerField()


class SheetCellSerializer(serializers.Serializer):
    occurrence_date = serializers.DateField()
    present = serializers.BooleanField()
    editable = serializers.BooleanField()


class SheetRowSerializer(serializers.Serializer):
    enrollment = EnrollmentSerializer()
    cells = SheetCellSerializer(many=True)
    stats = AttendanceStatsSerializer()


class AttendanceSheetSerializer(serializers.Serializer):
    """Serializer for the attendance grid of a session."""

    session = SessionSerializer()
    terms = TermOccurrencesSerializer(many=True)
    rows = SheetRowSerializer(many=True)
