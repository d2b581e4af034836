"""
Tests for the CourseService.
"""

from decimal import Decimal

import pytest

from drive_crm.schemas.course import CourseCreate, CourseUpdate
from drive_crm.services.course_service import CourseService


def make_course(service, name="Category B", base="30000", discounted=None):
    return service.create_course(CourseCreate(
        name=name,
        total_hours=Decimal("56"),
        base_price=Decimal(base),
        discounted_price=Decimal(discounted) if discounted else None,
    ))


class TestCourses:

    def test_effective_price(self, db_session):
        service = CourseService(db_session)

        plain = make_course(service, name="Plain")
        discounted = make_course(service, name="Promo", discounted="25000")

        assert plain.effective_price == Decimal("30000")
        assert discounted.effective_price == Decimal("25000")

    def test_discount_above_base_rejected(self):
        with pytest.raises(ValueError):
            CourseCreate(
                name="Bad",
                total_hours=Decimal("10"),
                base_price=Decimal("100"),
                discounted_price=Decimal("150"),
            )

    def test_update_checks_discount(self, db_session):
        service = CourseService(db_session)
        course = make_course(service, discounted="25000")

        with pytest.raises(ValueError, match="cannot exceed"):
            service.update_course(course.id, CourseUpdate(base_price=Decimal("20000")))

    def test_inactive_courses_hidden_by_default(self, db_session):
        service = CourseService(db_session)
        kept = make_course(service, name="Kept")
        retired = make_course(service, name="Retired")
        service.update_course(retired.id, CourseUpdate(is_active=False))

        assert [c.id for c in service.list_courses()] == [kept.id]
        assert len(service.list_courses(active=None)) == 2

    def test_name_cannot_be_cleared(self, db_session):
        service = CourseService(db_session)
        course = make_course(service)

        with pytest.raises(ValueError, match="cannot be cleared"):
            service.update_course(course.id, CourseUpdate(name=None))
