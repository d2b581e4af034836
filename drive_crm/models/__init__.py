"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from drive_crm.models.base import Base
from drive_crm.models.enums import (
    Role,
    RouteCategory,
    AccountStatus,
    EnrollmentStatus,
    LessonStatus,
    EntryType,
)
from drive_crm.models.profile import Profile
from drive_crm.models.account import Account
from drive_crm.models.course import Course
from drive_crm.models.enrollment import Enrollment
from drive_crm.models.attendance_log import AttendanceLog
from drive_crm.models.lesson import Lesson
from drive_crm.models.ledger_entry import LedgerEntry

__all__ = [
    "Base",
    "Role",
    "RouteCategory",
    "AccountStatus",
    "EnrollmentStatus",
    "LessonStatus",
    "EntryType",
    "Profile",
    "Account",
    "Course",
    "Enrollment",
    "AttendanceLog",
    "Lesson",
    "LedgerEntry",
]
