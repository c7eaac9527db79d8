from roster.handlers.views import (
    AttendanceStatsView,
    AttendanceView,
    EligibleOccurrencesView,
    EnrollmentTransitionView,
    OccurrenceListView,
    RosterSummaryView,
    TermListView,
)

__all__ = [
    "AttendanceStatsView",
    "AttendanceView",
    "EligibleOccurrencesView",
    "EnrollmentTransitionView",
    "OccurrenceListView",
    "RosterSummaryView",
    "TermListView",
]
