from django.urls import path

from roster.handlers import (
    AttendanceStatsView,
    AttendanceView,
    EligibleOccurrencesView,
    EnrollmentTransitionView,
    OccurrenceListView,
    RosterSummaryView,
    TermListView,
)

urlpatterns = [
    path("terms", TermListView.as_view(), name="term-list"),
    path(
        "sessions/<str:session_id>/occurrences",
        OccurrenceListView.as_view(),
        name="session-occurrences",
    ),
    path("sessions/<str:session_id>/roster", RosterSummaryView.as_view(), name="session-roster"),
    path(
        "sessions/<str:session_id>/attendance",
        AttendanceView.as_view(),
        name="session-attendance",
    ),
    path(
        "enrollments/transition",
        EnrollmentTransitionView.as_view(),
        name="enrollment-transition",
    ),
    path(
        "enrollments/<str:enrollment_id>/eligible-occurrences",
        EligibleOccurrencesView.as_view(),
        name="enrollment-eligible-occurrences",
    ),
    path(
        "enrollments/<str:enrollment_id>/attendance-stats",
        AttendanceStatsView.as_view(),
        name="enrollment-attendance-stats",
    ),
]
