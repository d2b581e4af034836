"""
Tests for the staff zone: clients, enrollments and the schedule.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def course_id(client, login_as):
    login_as("admin")
    response = client.post("/admin/courses", json={
        "name": "Category B",
        "total_hours": 4,
        "base_price": 30000,
        "discounted_price": 27000,
    })
    return response.json()["id"]


def enroll(client, course_id, name="Rita Rider"):
    account_id = client.post("/staff/clients", json={"full_name": name}).json()["id"]
    response = client.post("/staff/enrollments", json={
        "account_id": account_id, "service_id": course_id,
    })
    assert response.status_code == 201
    return response.json()


class TestClients:

    def test_create_and_fetch(self, client, login_as):
        login_as("instructor")

        account_id = client.post("/staff/clients", json={
            "full_name": "Rita Rider", "phone": "+7 900",
        }).json()["id"]
        card = client.get(f"/staff/clients/{account_id}").json()

        assert card["account"]["full_name"] == "Rita Rider"
        assert Decimal(card["balance"]) == Decimal("0")
        assert card["enrollments"] == []

    def test_unknown_client_returns_404(self, client, login_as):
        login_as("instructor")
        assert client.get("/staff/clients/999").status_code == 404

    def test_set_debtor_directly_rejected(self, client, login_as):
        login_as("instructor")
        account_id = client.post("/staff/clients", json={"full_name": "R"}).json()["id"]

        response = client.patch(
            f"/staff/clients/{account_id}", json={"account_status": "debtor"}
        )

        assert response.status_code == 400

    def test_export_clients(self, client, login_as):
        login_as("instructor")
        client.post("/staff/clients", json={"full_name": "Rita Rider"})

        lines = client.get("/staff/clients/export").text.split("\r\n")

        assert lines[0] == "id,full_name,phone,total_balance,account_status,created_at"
        assert ",Rita Rider,,0.00,active," in lines[1]


class TestEnrollments:

    def test_enroll_uses_discounted_price(self, client, course_id):
        data = enroll(client, course_id)

        assert Decimal(data["contract_price"]) == Decimal("27000")
        assert Decimal(data["remaining_hours"]) == Decimal("4")

    def test_initial_payment_credits_account(self, client, course_id):
        account_id = client.post("/staff/clients", json={"full_name": "Rita Rider"}).json()["id"]

        response = client.post("/staff/enrollments", json={
            "account_id": account_id,
            "service_id": course_id,
            "amount_paid_today": 5000,
        })
        card = client.get(f"/staff/clients/{account_id}").json()

        assert response.status_code == 201
        assert Decimal(card["balance"]) == Decimal("5000")
        assert [e["entry_type"] for e in card["entries"]] == ["payment"]

    def test_negative_initial_payment_rejected(self, client, course_id):
        account_id = client.post("/staff/clients", json={"full_name": "R"}).json()["id"]

        response = client.post("/staff/enrollments", json={
            "account_id": account_id,
            "service_id": course_id,
            "amount_paid_today": -1,
        })

        assert response.status_code == 422

    def test_cancel(self, client, course_id):
        enrollment_id = enroll(client, course_id)["id"]

        response = client.post(f"/staff/enrollments/{enrollment_id}/cancel")

        assert response.json()["status"] == "cancelled"

    def test_unknown_course_returns_404(self, client, login_as):
        login_as("instructor")
        account_id = client.post("/staff/clients", json={"full_name": "R"}).json()["id"]

        response = client.post("/staff/enrollments", json={
            "account_id": account_id, "service_id": 404,
        })

        assert response.status_code == 404


class TestSchedule:

    def test_book_and_complete_lesson(self, client, course_id):
        enrollment_id = enroll(client, course_id)["id"]

        lesson = client.post("/staff/schedule", json={
            "enrollment_id": enrollment_id,
            "starts_at": "2024-05-16T10:00:00",
        }).json()
        done = client.post(f"/staff/schedule/{lesson['id']}/complete")

        assert done.status_code == 200
        assert done.json()["status"] == "completed"
        enrollments = client.get("/staff/enrollments").json()
        assert Decimal(enrollments[0]["remaining_hours"]) == Decimal("2")

    def test_week_view(self, client, course_id):
        enrollment_id = enroll(client, course_id)["id"]
        for starts_at in ("2024-05-13T09:00:00", "2024-05-19T18:00:00", "2024-05-20T09:00:00"):
            client.post("/staff/schedule", json={
                "enrollment_id": enrollment_id, "starts_at": starts_at,
            })

        week = client.get(
            "/staff/schedule", params={"day": "2024-05-16", "view": "week"}
        ).json()
        day = client.get("/staff/schedule", params={"day": "2024-05-13"}).json()

        assert len(week) == 2
        assert len(day) == 1

    def test_bad_view_rejected(self, client, login_as):
        login_as("instructor")

        response = client.get("/staff/schedule", params={"view": "month"})

        assert response.status_code == 400

    def test_instructor_sees_only_own_lessons(self, client, course_id, login_as, instructor):
        enrollment_id = enroll(client, course_id)["id"]
        client.post("/staff/schedule", json={
            "enrollment_id": enrollment_id,
            "starts_at": "2024-05-16T10:00:00",
            "instructor_id": instructor.id,
        })

        me = login_as("instructor")
        client.post("/staff/schedule", json={
            "enrollment_id": enrollment_id,
            "starts_at": "2024-05-16T12:00:00",
            "instructor_id": instructor.id,
        })
        lessons = client.get("/staff/schedule", params={"day": "2024-05-16"}).json()

        assert [l["instructor_id"] for l in lessons] == [me]
