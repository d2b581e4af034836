"""
Pydantic schemas for enrollments and attendance.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from drive_crm.models.enums import EnrollmentStatus


class EnrollmentCreate(BaseModel):
    account_id: int
    service_id: int
    # Defaults to the course's current price when omitted
    contract_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    # Recorded as a payment on the account in the same transaction
    amount_paid_today: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)


class EnrollmentResponse(BaseModel):
    id: int
    account_id: int
    service_id: int
    contract_price: Decimal
    total_hours: Decimal
    remaining_hours: Decimal
    status: EnrollmentStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class AttendanceCreate(BaseModel):
    enrollment_id: int
    hours_spent: Decimal = Field(gt=0, decimal_places=2)
    session_date: datetime | None = None
    # Defaults to the calling instructor
    instructor_id: str | None = Field(default=None, max_length=64)


class AttendanceResponse(BaseModel):
    id: int
    enrollment_id: int
    instructor_id: str
    hours_spent: Decimal
    session_date: datetime

    model_config = {"from_attributes": True}


class AttendanceResult(BaseModel):
    """Attendance log together with the enrollment it drew hours from."""
    attendance: AttendanceResponse
    enrollment: EnrollmentResponse
