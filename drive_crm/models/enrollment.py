"""
Enrollment model.

A purchased block of instruction hours. remaining_hours is
decremented by attendance logs and must stay within
[0, total_hours]; EnrollmentService enforces that.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime, Numeric, ForeignKey,
    Enum as SAEnum, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from drive_crm.models.base import Base
from drive_crm.models.enums import EnrollmentStatus, enum_values


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        CheckConstraint(
            "remaining_hours >= 0 AND remaining_hours <= total_hours",
            name="ck_enrollments_remaining_hours",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    service_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id"), nullable=False, index=True
    )
    contract_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    total_hours: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    remaining_hours: Mapped[Decimal] = mapped_column(
        Numeric(6, 2), nullable=False
    )
    status: Mapped[EnrollmentStatus] = mapped_column(
        SAEnum(
            EnrollmentStatus,
            name="enrollment_status_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
        default=EnrollmentStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    account: Mapped["Account"] = relationship(back_populates="enrollments")
    course: Mapped["Course"] = relationship()
    attendance_logs: Mapped[list["AttendanceLog"]] = relationship(
        back_populates="enrollment"
    )

    def __repr__(self) -> str:
        return (
            f"<Enrollment {self.id} {self.remaining_hours}/{self.total_hours}h "
            f"({self.status.value})>"
        )
