from django.contrib import admin, messages

from roster.container import get_container
from roster.domain import EnrollmentId, EnrollmentStatus, TransitionRequest
from roster.domain.errors import DomainError
from roster.models import AttendanceRecord, Enrollment, Session, SessionTerm, Term


class SessionTermInline(admin.TabularInline):
    model = SessionTerm
    extra = 1
    ordering = ["position"]


@admin.register(Term)
class TermAdmin(admin.ModelAdmin):
    list_display = ["name", "year", "start_date", "end_date"]
    list_filter = ["year"]
    search_fields = ["name"]


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ["title", "weekday", "start_time", "end_time", "capacity"]
    list_filter = ["weekday", "terms"]
    search_fields = ["title", "location"]
    inlines = [SessionTermInline]


def _transition(modeladmin, request, queryset, target: EnrollmentStatus) -> None:
    transition = TransitionRequest(
        enrollment_ids=frozenset(EnrollmentId(pk) for pk in queryset.values_list("pk", flat=True)),
        target_status=target,
    )
    try:
        updated = get_container().enrollment_service.bulk_transition(transition)
    except DomainError as e:
        modeladmin.message_user(request, e.message, messages.ERROR)
        return
    modeladmin.message_user(request, f"{updated} enrollment(s) marked {target.value}", messages.SUCCESS)


@admin.action(description="Admit selected enrollments")
def admit(modeladmin, request, queryset):
    _transition(modeladmin, request, queryset, EnrollmentStatus.ADMITTED)


@admin.action(description="Move selected enrollments to the waitlist")
def waitlist(modeladmin, request, queryset):
    _transition(modeladmin, request, queryset, EnrollmentStatus.WAITLISTED)


@admin.action(description="Withdraw selected enrollments")
def withdraw(modeladmin, request, queryset):
    _transition(modeladmin, request, queryset, EnrollmentStatus.WITHDRAWN)


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ["participant_id", "session", "status", "created_at"]
    list_filter = ["status", "session"]
    search_fields = ["participant_id"]
    readonly_fields = ["status", "created_at"]
    actions = [admit, waitlist, withdraw]


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ["enrollment", "occurrence_date", "present"]
    list_filter = ["session", "present"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
