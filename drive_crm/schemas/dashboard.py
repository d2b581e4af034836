"""
Composite response schemas for the dashboard and detail views.
"""

from decimal import Decimal

from pydantic import BaseModel

from drive_crm.schemas.account import AccountResponse
from drive_crm.schemas.enrollment import AttendanceResponse, EnrollmentResponse
from drive_crm.schemas.ledger import FinanceSummary, LedgerEntryResponse
from drive_crm.schemas.lesson import LessonResponse


class AccountDetailResponse(BaseModel):
    account: AccountResponse
    balance: Decimal
    enrollments: list[EnrollmentResponse]
    entries: list[LedgerEntryResponse]


class TrainingResponse(BaseModel):
    enrollment: EnrollmentResponse
    course_name: str
    attendance: list[AttendanceResponse]


class ActiveEnrollmentResponse(EnrollmentResponse):
    """An active enrollment as listed by the attendance logger."""
    account_name: str


class StaffDashboardResponse(BaseModel):
    active_enrollments: int
    debtor_accounts: int
    lessons_today: list[LessonResponse]


class AdminDashboardResponse(BaseModel):
    finances: FinanceSummary
    active_enrollments: int
    total_accounts: int
    debtor_accounts: int
