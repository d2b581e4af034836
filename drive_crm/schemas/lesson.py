"""
Pydantic schemas for the lesson schedule.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from drive_crm.models.enums import LessonStatus


class LessonCreate(BaseModel):
    enrollment_id: int
    starts_at: datetime
    duration_hours: Decimal = Field(default=Decimal("2"), gt=0, decimal_places=2)
    instructor_id: str | None = Field(default=None, max_length=64)
    notes: str | None = Field(default=None, max_length=500)


class LessonResponse(BaseModel):
    id: int
    enrollment_id: int
    instructor_id: str
    starts_at: datetime
    duration_hours: Decimal
    status: LessonStatus
    notes: str | None

    model_config = {"from_attributes": True}
