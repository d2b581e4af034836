"""
Attendance log model.

Each row records hours spent in one session. Rows are written
only by EnrollmentService.log_attendance, together with the
matching remaining_hours decrement.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from drive_crm.models.base import Base


class AttendanceLog(Base):
    __tablename__ = "attendance_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    enrollment_id: Mapped[int] = mapped_column(
        ForeignKey("enrollments.id"), nullable=False, index=True
    )
    instructor_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id"), nullable=False, index=True
    )
    hours_spent: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    session_date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    enrollment: Mapped["Enrollment"] = relationship(
        back_populates="attendance_logs"
    )

    def __repr__(self) -> str:
        return f"<AttendanceLog {self.enrollment_id} {self.hours_spent}h>"
