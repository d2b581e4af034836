"""
Tests for the attendance logger (/log).
"""

from decimal import Decimal

import pytest

from drive_crm.models.account import Account
from drive_crm.models.attendance_log import AttendanceLog
from drive_crm.models.course import Course
from drive_crm.models.enrollment import Enrollment
from drive_crm.models.enums import AccountStatus, EntryType, Role
from drive_crm.models.ledger_entry import LedgerEntry
from drive_crm.models.profile import Profile


@pytest.fixture
def enrollment(db_session):
    account = Account(full_name="Rita Rider")
    course = Course(name="Category B", total_hours=Decimal("10"), base_price=Decimal("900"))
    db_session.add_all([account, course])
    db_session.flush()
    enrollment = Enrollment(
        account_id=account.id,
        service_id=course.id,
        contract_price=Decimal("900"),
        total_hours=Decimal("10"),
        remaining_hours=Decimal("10"),
    )
    db_session.add(enrollment)
    db_session.commit()
    return enrollment


class TestLogSession:

    def test_log_draws_hours(self, client, login_as, enrollment):
        instructor_id = login_as("instructor")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id, "hours_spent": 2,
        })

        assert response.status_code == 201
        data = response.json()
        assert data["attendance"]["instructor_id"] == instructor_id
        assert Decimal(data["enrollment"]["remaining_hours"]) == Decimal("8")

    def test_overbooking_rejected(self, client, login_as, enrollment):
        login_as("instructor")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id, "hours_spent": 11,
        })

        assert response.status_code == 400
        assert "Insufficient hours" in response.json()["detail"]
        history = client.get(f"/staff/enrollments/{enrollment.id}/attendance").json()
        assert history == []

    def test_unknown_enrollment_returns_404(self, client, login_as):
        login_as("instructor")

        response = client.post("/log", json={"enrollment_id": 999, "hours_spent": 1})

        assert response.status_code == 404

    def test_zero_hours_rejected(self, client, login_as, enrollment):
        login_as("instructor")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id, "hours_spent": 0,
        })

        assert response.status_code == 422

    def test_admin_logs_for_instructor(self, client, login_as, enrollment, instructor):
        login_as("admin")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id,
            "hours_spent": 1,
            "instructor_id": instructor.id,
        })

        assert response.json()["attendance"]["instructor_id"] == instructor.id

    def test_instructor_cannot_log_for_others(self, client, login_as, enrollment, instructor):
        caller = login_as("instructor")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id,
            "hours_spent": 1,
            "instructor_id": instructor.id,
        })

        assert response.json()["attendance"]["instructor_id"] == caller

    def test_list_active_enrollments(self, client, login_as, enrollment):
        login_as("instructor")

        data = client.get("/log").json()

        assert [e["id"] for e in data] == [enrollment.id]
        assert data[0]["account_name"] == "Rita Rider"

    def test_rider_cannot_log(self, client, login_as, db_session, enrollment):
        login_as("rider")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id, "hours_spent": 1,
        })

        assert response.status_code == 400
        assert "not an instructor" in response.json()["detail"]
        assert db_session.query(AttendanceLog).count() == 0

    def test_admin_cannot_name_rider_as_instructor(self, client, login_as, db_session, enrollment):
        rider = Profile(id="rider-1", full_name="Rita Rider", role=Role.RIDER)
        db_session.add(rider)
        db_session.commit()
        login_as("admin")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id,
            "hours_spent": 1,
            "instructor_id": rider.id,
        })

        assert response.status_code == 400


class TestSessionCharge:

    def test_session_charged_to_account(self, client, login_as, db_session, enrollment):
        login_as("instructor")

        client.post("/log", json={"enrollment_id": enrollment.id, "hours_spent": 2})

        account = db_session.get(Account, enrollment.account_id)
        assert account.total_balance == Decimal("-180.00")
        assert account.account_status == AccountStatus.DEBTOR
        entries = db_session.query(LedgerEntry).all()
        assert [(e.entry_type, e.amount) for e in entries] == [
            (EntryType.SALARY_EXPENSE, Decimal("-180.00")),
        ]

    def test_rejected_session_leaves_no_charge(self, client, login_as, db_session, enrollment):
        login_as("instructor")

        response = client.post("/log", json={
            "enrollment_id": enrollment.id, "hours_spent": 11,
        })

        assert response.status_code == 400
        assert db_session.query(LedgerEntry).count() == 0
        assert db_session.get(Account, enrollment.account_id).total_balance == Decimal("0")
