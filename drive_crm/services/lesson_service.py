"""
Lesson service — the staff schedule.

Completing a lesson logs attendance for its duration through
EnrollmentService, so the hours are drawn in the same unit of
work as the status change.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from drive_crm.models.enums import EnrollmentStatus, LessonStatus
from drive_crm.models.lesson import Lesson
from drive_crm.schemas.lesson import LessonCreate
from drive_crm.services.enrollment_service import EnrollmentService


def day_window(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def week_window(day: date) -> tuple[datetime, datetime]:
    """Monday-to-Monday window containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    start = datetime.combine(monday, time.min)
    return start, start + timedelta(days=7)


class LessonService:

    def __init__(self, db: Session):
        self.db = db
        self.enrollment_service = EnrollmentService(db)

    def schedule_lesson(self, request: LessonCreate, instructor_id: str) -> Lesson:
        enrollment = self.enrollment_service.get_enrollment(request.enrollment_id)
        if enrollment.status != EnrollmentStatus.ACTIVE:
            raise ValueError(f"Enrollment {enrollment.id} is not active")
        self.enrollment_service.require_instructor(instructor_id)

        lesson = Lesson(
            enrollment_id=enrollment.id,
            instructor_id=instructor_id,
            starts_at=request.starts_at,
            duration_hours=request.duration_hours,
            notes=request.notes,
        )
        self.db.add(lesson)
        self.db.flush()
        return lesson

    def get_lesson(self, lesson_id: int) -> Lesson:
        lesson = self.db.get(Lesson, lesson_id)
        if not lesson:
            raise ValueError(f"Lesson {lesson_id} not found")
        return lesson

    def list_lessons(
        self,
        start: datetime,
        end: datetime,
        instructor_id: str | None = None,
    ) -> list[Lesson]:
        """Lessons starting in [start, end), earliest first."""
        query = (
            select(Lesson)
            .where(Lesson.starts_at >= start, Lesson.starts_at < end)
            .order_by(Lesson.starts_at)
        )
        if instructor_id is not None:
            query = query.where(Lesson.instructor_id == instructor_id)
        return list(self.db.execute(query).scalars().all())

    def cancel_lesson(self, lesson_id: int) -> Lesson:
        lesson = self.get_lesson(lesson_id)
        if lesson.status != LessonStatus.SCHEDULED:
            raise ValueError(
                f"Cannot cancel lesson in status {lesson.status.value}"
            )
        lesson.status = LessonStatus.CANCELLED
        self.db.flush()
        return lesson

    def complete_lesson(self, lesson_id: int) -> Lesson:
        lesson = self.get_lesson(lesson_id)
        if lesson.status != LessonStatus.SCHEDULED:
            raise ValueError(
                f"Cannot complete lesson in status {lesson.status.value}"
            )
        self.enrollment_service.log_attendance(
            lesson.enrollment_id,
            lesson.instructor_id,
            Decimal(lesson.duration_hours),
            session_date=lesson.starts_at,
        )
        lesson.status = LessonStatus.COMPLETED
        self.db.flush()
        return lesson
