"""
Lesson model — a scheduled driving lesson on the staff calendar.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from drive_crm.models.base import Base
from drive_crm.models.enums import LessonStatus, enum_values


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[int] = mapped_column(primary_key=True)
    enrollment_id: Mapped[int] = mapped_column(
        ForeignKey("enrollments.id"), nullable=False, index=True
    )
    instructor_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    starts_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, index=True
    )
    duration_hours: Mapped[Decimal] = mapped_column(
        Numeric(6, 2), nullable=False
    )
    status: Mapped[LessonStatus] = mapped_column(
        SAEnum(
            LessonStatus,
            name="lesson_status_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
        default=LessonStatus.SCHEDULED,
    )
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    enrollment: Mapped["Enrollment"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<Lesson {self.id} {self.starts_at:%Y-%m-%d %H:%M} "
            f"({self.status.value})>"
        )
