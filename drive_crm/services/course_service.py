"""
Course service — the catalogue of training packages.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from drive_crm.models.course import Course
from drive_crm.schemas.course import CourseCreate, CourseUpdate


class CourseService:

    def __init__(self, db: Session):
        self.db = db

    def create_course(self, request: CourseCreate) -> Course:
        course = Course(
            name=request.name,
            total_hours=request.total_hours,
            base_price=request.base_price,
            discounted_price=request.discounted_price,
        )
        self.db.add(course)
        self.db.flush()
        return course

    def get_course(self, course_id: int) -> Course:
        course = self.db.get(Course, course_id)
        if not course:
            raise ValueError(f"Course {course_id} not found")
        return course

    def update_course(self, course_id: int, request: CourseUpdate) -> Course:
        course = self.get_course(course_id)
        for name, value in request.model_dump(exclude_unset=True).items():
            if value is None and name != "discounted_price":
                raise ValueError(f"{name} cannot be cleared")
            setattr(course, name, value)

        if (
            course.discounted_price is not None
            and course.discounted_price > course.base_price
        ):
            raise ValueError("discounted_price cannot exceed base_price")

        self.db.flush()
        return course

    def list_courses(self, active: bool | None = True) -> list[Course]:
        query = select(Course).order_by(Course.name)
        if active is not None:
            query = query.where(Course.is_active == active)
        return list(self.db.execute(query).scalars().all())
