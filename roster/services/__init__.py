from roster.services.attendance_service import AttendanceService
from roster.services.enrollment_service import EnrollmentService
from roster.services.schedule_service import ScheduleService

__all__ = [
    "AttendanceService",
    "EnrollmentService",
    "ScheduleService",
]
