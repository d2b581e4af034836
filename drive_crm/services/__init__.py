"""Business logic services."""

from drive_crm.services.ledger_service import LedgerService
from drive_crm.services.profile_service import ProfileService
from drive_crm.services.account_service import AccountService
from drive_crm.services.course_service import CourseService
from drive_crm.services.enrollment_service import EnrollmentService
from drive_crm.services.lesson_service import LessonService

__all__ = [
    "LedgerService",
    "ProfileService",
    "AccountService",
    "CourseService",
    "EnrollmentService",
    "LessonService",
]
