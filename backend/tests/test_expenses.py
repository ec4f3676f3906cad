"""Tests for expense endpoints and repository."""

from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models.notification import Notification
from app.repositories.expense_repository import ExpenseRepository
from app.schemas.expense import ExpenseCreate, ExpenseUpdate


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def _payload(**overrides) -> dict:
    payload = {
        "agent_id": "agent-1",
        "amount": "350000",
        "payment_method": "cash",
        "commentary": "Office rent",
    }
    payload.update(overrides)
    return payload


class TestExpenseRepository:
    def test_total_empty(self, db_session):
        total, count = ExpenseRepository(db_session).total()
        assert total == Decimal("0")
        assert count == 0

    def test_total_per_agent(self, db_session):
        repo = ExpenseRepository(db_session)
        repo.create(ExpenseCreate(agent_id="agent-1", amount=Decimal("100")))
        repo.create(ExpenseCreate(agent_id="agent-1", amount=Decimal("50.25")))
        repo.create(ExpenseCreate(agent_id="agent-2", amount=Decimal("999")))

        assert repo.total(agent_id="agent-1") == (Decimal("150.25"), 2)
        assert repo.total() == (Decimal("1149.25"), 3)

    def test_update_keeps_unset_fields(self, db_session):
        repo = ExpenseRepository(db_session)
        expense = repo.create(ExpenseCreate(agent_id="agent-1", amount=Decimal("100"), commentary="Taxi"))

        updated = repo.update(expense.id, ExpenseUpdate(amount=Decimal("120")))

        assert updated.amount == Decimal("120")
        assert updated.commentary == "Taxi"
        assert updated.payment_method == "cash"

    def test_update_missing(self, db_session):
        assert ExpenseRepository(db_session).update(uuid4(), ExpenseUpdate(amount=Decimal("1"))) is None


class TestExpenseAPI:
    def test_create(self, client, db_session):
        response = client.post("/v1/expenses/", json=_payload())
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["amount"]) == Decimal("350000")
        assert data["commentary"] == "Office rent"
        notification = db_session.query(Notification).one()
        assert notification.category == "expense"

    def test_create_unknown_method_is_cash(self, client):
        response = client.post("/v1/expenses/", json=_payload(payment_method="cheque"))
        assert response.status_code == 201
        assert response.json()["payment_method"] == "cash"

    def test_create_rejects_zero_amount(self, client):
        response = client.post("/v1/expenses/", json=_payload(amount="0"))
        assert response.status_code == 422

    def test_create_rejects_sub_cent_amount(self, client):
        response = client.post("/v1/expenses/", json=_payload(amount="10.005"))
        assert response.status_code == 422

    def test_list_and_filter(self, client):
        client.post("/v1/expenses/", json=_payload(commentary="First"))
        client.post("/v1/expenses/", json=_payload(agent_id="agent-2", commentary="Second"))

        all_expenses = client.get("/v1/expenses/").json()
        assert sorted(e["commentary"] for e in all_expenses) == ["First", "Second"]
        filtered = client.get("/v1/expenses/", params={"agent_id": "agent-2"}).json()
        assert [e["commentary"] for e in filtered] == ["Second"]

    def test_total(self, client):
        client.post("/v1/expenses/", json=_payload(amount="1000"))
        client.post("/v1/expenses/", json=_payload(amount="250.50"))

        data = client.get("/v1/expenses/total").json()
        assert Decimal(data["total"]) == Decimal("1250.50")
        assert data["count"] == 2

    def test_get_update_delete(self, client):
        created = client.post("/v1/expenses/", json=_payload()).json()

        fetched = client.get(f"/v1/expenses/{created['id']}")
        assert fetched.status_code == 200

        updated = client.put(
            f"/v1/expenses/{created['id']}",
            json={"payment_method": "terminal", "commentary": "Rent, October"},
        )
        assert updated.status_code == 200
        assert updated.json()["payment_method"] == "terminal"
        assert updated.json()["commentary"] == "Rent, October"
        assert Decimal(updated.json()["amount"]) == Decimal("350000")

        assert client.delete(f"/v1/expenses/{created['id']}").status_code == 204
        assert client.get(f"/v1/expenses/{created['id']}").status_code == 404

    def test_not_found(self, client):
        missing = uuid4()
        assert client.get(f"/v1/expenses/{missing}").status_code == 404
        assert client.put(f"/v1/expenses/{missing}", json={"amount": "1"}).status_code == 404
        assert client.delete(f"/v1/expenses/{missing}").status_code == 404
