"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from roster.container import get_container
from roster.domain.errors import (
    CapacityExceededError,
    DomainError,
    ErrorCode,
    ValidationError,
)
from roster.handlers import cache_keys
from roster.handlers.serializers import (
    AttendanceSheetSerializer,
    AttendanceStatsSerializer,
    BulkAttendanceSerializer,
    OccurrenceSerializer,
    RosterSummarySerializer,
    SaveResultSerializer,
    TermSerializer,
    TransitionRequestSerializer,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.TERM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ENROLLMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
}


def error_response(error: DomainError) -> Response:
    body: dict = {"code": error.code.value, "message": error.message}
    if isinstance(error, ValidationError):
        body["errors"] = error.errors
    if isinstance(error, CapacityExceededError):
        body["available"] = error.available
    return Response(body, status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST))


def invalid_input_response(errors: dict) -> Response:
    return Response(
        {
            "code": ErrorCode.VALIDATION_FAILED.value,
            "message": "Invalid request body",
            "errors": errors,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class AdminWriteMixin:
    """Reads follow the default permissions; writes require a staff user."""

    def get_permissions(self):
        if self.request.method not in ("GET", "HEAD", "OPTIONS"):
            return [IsAdminUser()]
        return super().get_permissions()


class TermListView(APIView):
    """Handler for GET /api/terms"""

    def get(self, request: Request) -> Response:
        terms = get_container().schedule_service.list_terms()
        return Response(TermSerializer(terms, many=True).data)


class OccurrenceListView(APIView):
    """Handler for GET /api/sessions/{session_id}/occurrences"""

    def get(self, request: Request, session_id: str) -> Response:
        key = cache_keys.session_occurrences(session_id)
        data = cache.get(key)
        if data is None:
            try:
                occurrences = get_container().schedule_service.generate_occurrences(session_id)
            except DomainError as e:
                return error_response(e)
            data = OccurrenceSerializer(occurrences, many=True).data
            cache.set(key, data, settings.ROSTER_CACHE_TIMEOUT)
        return Response({"session_id": session_id, "occurrences": data})


class RosterSummaryView(APIView):
    """Handler for GET /api/sessions/{session_id}/roster"""

    def get(self, request: Request, session_id: str) -> Response:
        try:
            summary = get_container().enrollment_service.roster_summary(session_id)
        except DomainError as e:
            return error_response(e)
        return Response(RosterSummarySerializer(summary).data)


class AttendanceView(AdminWriteMixin, APIView):
    """Handler for GET and POST /api/sessions/{session_id}/attendance"""

    def get(self, request: Request, session_id: str) -> Response:
        try:
            sheet = get_container().attendance_service.attendance_sheet(session_id)
        except DomainError as e:
            return error_response(e)
        return Response(AttendanceSheetSerializer(sheet).data)

    def post(self, request: Request, session_id: str) -> Response:
        serializer = BulkAttendanceSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer.errors)
        try:
            result = get_container().attendance_service.bulk_save(session_id, serializer.entries())
        except DomainError as e:
            return error_response(e)
        return Response(SaveResultSerializer(result).data)


class EnrollmentTransitionView(AdminWriteMixin, APIView):
    """Handler for POST /api/enrollments/transition"""

    def post(self, request: Request) -> Response:
        serializer = TransitionRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer.errors)

        service = get_container().enrollment_service
        try:
            transition = service.build_request(
                serializer.validated_data["enrollment_ids"],
                serializer.validated_data["target_status"],
            )
            updated = service.bulk_transition(transition)
        except DomainError as e:
            return error_response(e)
        return Response({"updated": updated})


class EligibleOccurrencesView(APIView):
    """Handler for GET /api/enrollments/{enrollment_id}/eligible-occurrences"""

    def get(self, request: Request, enrollment_id: str) -> Response:
        try:
            dates = get_container().attendance_service.eligible_occurrences(enrollment_id)
        except DomainError as e:
            return error_response(e)
        return Response(
            {
                "enrollment_id": enrollment_id,
                "dates": [d.isoformat() for d in dates],
            }
        )


class AttendanceStatsView(APIView):
    """Handler for GET /api/enrollments/{enrollment_id}/attendance-stats"""

    def get(self, request: Request, enrollment_id: str) -> Response:
        try:
            stats = get_container().attendance_service.stats_for(enrollment_id)
        except DomainError as e:
            return error_response(e)
        return Response(AttendanceStatsSerializer(stats).data)
