"""
Tests for the money endpoints: expenses, payments, admin finances
and CSV exports.

These test the HTTP layer. Business logic is tested in
tests/services/test_ledger_service.py.
"""

from decimal import Decimal

import pytest


def create_client(client, name="Rita Rider"):
    return client.post("/staff/clients", json={"full_name": name}).json()["id"]


class TestExpenses:

    @pytest.fixture(autouse=True)
    def signed_in(self, login_as):
        login_as("staff")

    def test_expense_stored_negative(self, client):
        response = client.post("/expenses", json={
            "amount": 120.5,
            "entry_type": "overhead",
            "description": "Fuel",
        })

        assert response.status_code == 201
        assert Decimal(response.json()["amount"]) == Decimal("-120.50")

    def test_payment_type_rejected(self, client):
        response = client.post("/expenses", json={
            "amount": 10,
            "entry_type": "payment",
            "description": "Not an expense",
        })

        assert response.status_code == 422

    def test_non_positive_amount_rejected(self, client):
        response = client.post("/expenses", json={
            "amount": -10,
            "description": "Negative",
        })

        assert response.status_code == 422

    def test_list_newest_first(self, client):
        client.post("/expenses", json={"amount": 10, "description": "First"})
        client.post("/expenses", json={
            "amount": 900, "entry_type": "salary_expense", "description": "Second",
        })

        data = client.get("/expenses").json()

        assert [e["description"] for e in data] == ["Second", "First"]

    def test_export_csv(self, client):
        client.post("/expenses", json={"amount": 10, "description": "Fuel, diesel"})

        response = client.get("/expenses/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        lines = response.text.split("\r\n")
        assert lines[0] == "created_at,entry_type,description,amount"
        assert lines[1].endswith(',overhead,"Fuel, diesel",-10.00')

    def test_export_empty(self, client):
        assert client.get("/expenses/export").text == ""


class TestPayments:

    @pytest.fixture(autouse=True)
    def signed_in(self, login_as):
        login_as("instructor")

    def test_payment_updates_balance(self, client):
        account_id = create_client(client)

        response = client.post("/staff/payments", json={
            "account_id": account_id, "amount": 500,
        })

        assert response.status_code == 201
        card = client.get(f"/staff/clients/{account_id}").json()
        assert Decimal(card["balance"]) == Decimal("500")
        assert Decimal(card["account"]["total_balance"]) == Decimal("500")

    def test_payment_to_unknown_account_returns_404(self, client):
        response = client.post("/staff/payments", json={
            "account_id": 999, "amount": 500,
        })

        assert response.status_code == 404

    def test_list_payments(self, client):
        account_id = create_client(client)
        client.post("/staff/payments", json={"account_id": account_id, "amount": 100})

        data = client.get("/staff/payments", params={"account_id": account_id}).json()

        assert len(data) == 1
        assert data[0]["entry_type"] == "payment"


class TestAdminFinances:

    @pytest.fixture(autouse=True)
    def signed_in(self, login_as):
        login_as("admin")

    def test_balance_after_mixed_entries(self, client):
        account_id = create_client(client)
        client.post("/staff/payments", json={"account_id": account_id, "amount": 1000})
        for amount, entry_type in (("-300", "discount"), ("-50", "overhead")):
            response = client.post("/admin/ledger", json={
                "amount": amount,
                "entry_type": entry_type,
                "description": "Adjustment",
                "account_id": account_id,
            })
            assert response.status_code == 201

        card = client.get(f"/staff/clients/{account_id}").json()

        assert Decimal(card["balance"]) == Decimal("650")

    def test_negative_balance_marks_debtor(self, client):
        account_id = create_client(client)

        client.post("/admin/ledger", json={
            "amount": "-200",
            "entry_type": "discount",
            "description": "Course charge",
            "account_id": account_id,
        })

        data = client.get("/staff/clients", params={"status": "debtor"}).json()
        assert [a["id"] for a in data] == [account_id]

    def test_zero_amount_rejected(self, client):
        response = client.post("/admin/ledger", json={
            "amount": 0, "entry_type": "payment", "description": "Nothing",
        })

        assert response.status_code == 422

    def test_summary(self, client):
        client.post("/admin/ledger", json={
            "amount": 1000, "entry_type": "payment", "description": "Cash",
        })
        client.post("/expenses", json={"amount": 250, "description": "Rent"})

        data = client.get("/admin/finances").json()

        assert Decimal(data["income"]) == Decimal("1000")
        assert Decimal(data["expenses"]) == Decimal("-250")
        assert Decimal(data["net"]) == Decimal("750")
        assert data["entry_count"] == 2

    def test_summary_separates_client_charges(self, client):
        account_id = create_client(client)
        client.post("/admin/ledger", json={
            "amount": "-400",
            "entry_type": "salary_expense",
            "description": "Training session: 4h",
            "account_id": account_id,
        })
        client.post("/expenses", json={"amount": 250, "description": "Rent"})

        data = client.get("/admin/finances").json()
        expenses = client.get("/expenses").json()

        assert Decimal(data["expenses"]) == Decimal("-250")
        assert Decimal(data["charges"]) == Decimal("-400")
        assert Decimal(data["net"]) == Decimal("-250")
        assert [e["description"] for e in expenses] == ["Rent"]

    def test_filter_entries_by_type(self, client):
        client.post("/admin/ledger", json={
            "amount": 1000, "entry_type": "payment", "description": "Cash",
        })
        client.post("/expenses", json={"amount": 250, "description": "Rent"})

        data = client.get(
            "/admin/finances/entries", params={"entry_type": ["overhead"]}
        ).json()

        assert [e["description"] for e in data] == ["Rent"]

    def test_ledger_export(self, client):
        client.post("/admin/ledger", json={
            "amount": 1000, "entry_type": "payment", "description": 'Paid "cash"',
        })

        lines = client.get("/admin/finances/export").text.split("\r\n")

        assert lines[0] == "id,created_at,entry_type,account_id,description,amount"
        assert lines[1].endswith(',payment,,"Paid ""cash""",1000.00')

    def test_reconcile_unknown_account(self, client):
        assert client.post("/admin/accounts/77/reconcile").status_code == 404

    def test_dashboard(self, client):
        create_client(client)

        data = client.get("/admin").json()

        assert data["total_accounts"] == 1
        assert data["debtor_accounts"] == 0
