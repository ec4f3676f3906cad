"""Tests for ticket API endpoints."""

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm.exc import StaleDataError

from app.main import app
from app.models.notification import Notification
from app.models.ticket_payment import TicketPayment
from app.services.ticket_payment_service import TicketPaymentService


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def _create_ticket(client: TestClient, **overrides) -> dict:
    payload = {
        "passenger_name": "Aziz Karimov",
        "service_type": "ticket",
        "origin_code": "TAS",
        "destination_code": "IST",
        "airline_code": "HY",
        "travel_date": "2026-11-02",
        "agent_id": "agent-1",
        "agent_name": "Dilnoza",
        "price": "1500",
    }
    payload.update(overrides)
    response = client.post("/v1/tickets/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTicket:
    def test_create_ticket(self, client):
        data = _create_ticket(client)
        assert data["passenger_name"] == "Aziz Karimov"
        assert Decimal(data["price"]) == Decimal("1500")
        assert Decimal(data["paid_amount"]) == Decimal("0")
        assert data["payment_status"] == "pending"
        assert data["payment_date"] is None

    def test_create_ticket_with_payments(self, client, db_session):
        data = _create_ticket(
            client,
            price="1000",
            payments=[
                {"amount": "700", "payment_method": "cash"},
                {"amount": "300", "payment_method": "uzcard"},
            ],
        )
        assert data["payment_status"] == "paid"
        assert Decimal(data["paid_amount"]) == Decimal("1000")
        assert data["payment_date"] is not None
        assert db_session.query(TicketPayment).count() == 2

    def test_create_ticket_notifies(self, client, db_session):
        _create_ticket(client, service_type="train", origin_code=None, destination_code=None)
        notification = db_session.query(Notification).one()
        assert notification.category == "ticket"
        assert notification.message == "Ж/Д билет успешно оформлен"

    def test_create_tour(self, client):
        data = _create_ticket(client, service_type="tour", origin_code=None, destination_code=None)
        assert data["service_type"] == "tour"

    def test_create_zero_price_ticket_is_paid(self, client):
        data = _create_ticket(client, price="0")
        assert data["payment_status"] == "paid"
        assert data["payment_date"] is not None

    def test_create_requires_agent(self, client):
        response = client.post("/v1/tickets/", json={"passenger_name": "X", "price": "10"})
        assert response.status_code == 422

    def test_create_sub_cent_price_is_422(self, client):
        payload = {"passenger_name": "A", "agent_id": "agent-1", "price": "100.005"}
        response = client.post("/v1/tickets/", json=payload)
        assert response.status_code == 422

    def test_create_negative_price(self, client):
        response = client.post(
            "/v1/tickets/", json={"passenger_name": "X", "agent_id": "a", "price": "-10"}
        )
        assert response.status_code == 422


class TestListTickets:
    def test_list_empty(self, client):
        response = client.get("/v1/tickets/")
        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["X-Total-Count"] == "0"

    def test_list_includes_payments_and_remaining(self, client):
        ticket = _create_ticket(client, price="1000")
        client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "400", "payment_method": "cash"}]},
        )

        data = client.get("/v1/tickets/").json()
        assert len(data) == 1
        assert Decimal(data[0]["paid_total"]) == Decimal("400")
        assert Decimal(data[0]["remaining"]) == Decimal("600")
        assert len(data[0]["payments"]) == 1

    def test_list_refreshes_after_changes(self, client):
        _create_ticket(client, passenger_name="First")
        assert len(client.get("/v1/tickets/").json()) == 1

        _create_ticket(client, passenger_name="Second")
        data = client.get("/v1/tickets/").json()
        assert sorted(t["passenger_name"] for t in data) == ["First", "Second"]

    def test_list_filters(self, client):
        paid = _create_ticket(client, price="100", agent_id="agent-2")
        client.post(
            f"/v1/tickets/{paid['id']}/payments",
            json={"entries": [{"amount": "100", "payment_method": "visa"}]},
        )
        _create_ticket(client, price="200", service_type="train")

        pending = client.get("/v1/tickets/", params={"payment_status": "pending"}).json()
        assert [t["service_type"] for t in pending] == ["train"]

        by_agent = client.get("/v1/tickets/", params={"agent_id": "agent-2"}).json()
        assert [t["id"] for t in by_agent] == [paid["id"]]

        trains = client.get("/v1/tickets/", params={"service_type": "train"}).json()
        assert len(trains) == 1

    def test_list_pagination(self, client):
        for i in range(3):
            _create_ticket(client, passenger_name=f"P{i}")
        response = client.get("/v1/tickets/", params={"skip": 1, "limit": 1})
        assert len(response.json()) == 1
        assert response.headers["X-Total-Count"] == "3"


class TestGetAndUpdateTicket:
    def test_get_ticket(self, client):
        ticket = _create_ticket(client)
        response = client.get(f"/v1/tickets/{ticket['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == ticket["id"]
        assert Decimal(response.json()["remaining"]) == Decimal("1500")

    def test_get_ticket_not_found(self, client):
        response = client.get(f"/v1/tickets/{uuid4()}")
        assert response.status_code == 404

    def test_update_descriptive_fields(self, client):
        ticket = _create_ticket(client)
        response = client.put(
            f"/v1/tickets/{ticket['id']}",
            json={"comments": "Window seat", "order_number": "PNR123"},
        )
        assert response.status_code == 200
        assert response.json()["comments"] == "Window seat"
        assert response.json()["order_number"] == "PNR123"

    def test_update_cannot_change_price_or_payment(self, client):
        ticket = _create_ticket(client, price="1500")
        response = client.put(
            f"/v1/tickets/{ticket['id']}",
            json={"price": "1", "paid_amount": "1", "payment_status": "paid", "comments": "x"},
        )
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["price"]) == Decimal("1500")
        assert Decimal(data["paid_amount"]) == Decimal("0")
        assert data["payment_status"] == "pending"

    def test_update_not_found(self, client):
        response = client.put(f"/v1/tickets/{uuid4()}", json={"comments": "x"})
        assert response.status_code == 404


class TestSubmitPayments:
    def test_submit_full_payment(self, client):
        ticket = _create_ticket(client, price="1500")
        response = client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "1500", "payment_method": "cash"}]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payment_status"] == "paid"
        assert Decimal(data["paid_amount"]) == Decimal("1500")
        assert Decimal(data["remaining"]) == Decimal("0")
        assert data["payment_date"] is not None

    def test_submit_partial_then_rest(self, client):
        ticket = _create_ticket(client, price="1000")
        first = client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "400", "payment_method": "cash"}]},
        ).json()
        assert first["payment_status"] == "pending"
        assert Decimal(first["remaining"]) == Decimal("600")

        second = client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "600", "payment_method": "visa"}]},
        ).json()
        assert second["payment_status"] == "paid"

        payments = client.get(f"/v1/tickets/{ticket['id']}/payments").json()
        assert [(Decimal(p["amount"]), p["payment_method"]) for p in payments] == [
            (Decimal("400"), "cash"),
            (Decimal("600"), "visa"),
        ]

    def test_unknown_method_defaults_to_cash(self, client):
        ticket = _create_ticket(client)
        data = client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "100", "payment_method": "crypto"}, {"amount": "50"}]},
        ).json()
        assert [e["payment_method"] for e in data["entries"]] == ["cash", "cash"]

    def test_empty_submission_is_400(self, client):
        ticket = _create_ticket(client)
        response = client.post(f"/v1/tickets/{ticket['id']}/payments", json={"entries": []})
        assert response.status_code == 400
        assert response.json()["detail"] == "No payment amount entered"

    def test_non_positive_amount_is_422(self, client):
        ticket = _create_ticket(client)
        response = client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "0", "payment_method": "cash"}]},
        )
        assert response.status_code == 422

    def test_sub_cent_amounts_are_422(self, client, db_session):
        ticket = _create_ticket(client, price="1")
        response = client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={
                "entries": [
                    {"amount": "0.125", "payment_method": "cash"},
                    {"amount": "0.125", "payment_method": "visa"},
                ]
            },
        )
        assert response.status_code == 422
        assert db_session.query(TicketPayment).count() == 0

    def test_paid_amount_matches_stored_ledger(self, client):
        ticket = _create_ticket(client, price="1")
        data = client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={
                "entries": [
                    {"amount": "0.12", "payment_method": "cash"},
                    {"amount": "0.13", "payment_method": "visa"},
                ]
            },
        ).json()
        assert Decimal(data["paid_amount"]) == Decimal("0.25")

        view = client.get(f"/v1/tickets/{ticket['id']}").json()
        assert Decimal(view["paid_amount"]) == Decimal("0.25")
        assert Decimal(view["paid_total"]) == Decimal(view["paid_amount"])
        assert sorted(Decimal(p["amount"]) for p in view["payments"]) == [Decimal("0.12"), Decimal("0.13")]

    def test_unknown_ticket_is_404(self, client):
        response = client.post(
            f"/v1/tickets/{uuid4()}/payments",
            json={"entries": [{"amount": "100", "payment_method": "cash"}]},
        )
        assert response.status_code == 404

    def test_conflict_is_409(self, client):
        ticket = _create_ticket(client)
        with patch.object(TicketPaymentService, "_apply", side_effect=StaleDataError("stale")):
            response = client.post(
                f"/v1/tickets/{ticket['id']}/payments",
                json={"entries": [{"amount": "100", "payment_method": "cash"}]},
            )
        assert response.status_code == 409

    def test_double_submit_without_key_counts_twice(self, client):
        ticket = _create_ticket(client, price="1000")
        body = {"entries": [{"amount": "300", "payment_method": "cash"}]}
        client.post(f"/v1/tickets/{ticket['id']}/payments", json=body)
        data = client.post(f"/v1/tickets/{ticket['id']}/payments", json=body).json()
        assert Decimal(data["paid_amount"]) == Decimal("600")

    def test_double_submit_with_key_replays(self, client, db_session):
        ticket = _create_ticket(client, price="1000")
        body = {"entries": [{"amount": "300", "payment_method": "cash"}]}
        headers = {"Idempotency-Key": f"pay-{uuid4()}"}

        first = client.post(f"/v1/tickets/{ticket['id']}/payments", json=body, headers=headers)
        second = client.post(f"/v1/tickets/{ticket['id']}/payments", json=body, headers=headers)

        assert first.status_code == second.status_code == 200
        assert second.headers.get("Idempotency-Replayed") == "true"
        assert second.json() == first.json()
        assert Decimal(second.json()["paid_amount"]) == Decimal("300")
        assert db_session.query(TicketPayment).count() == 1

    def test_key_reused_for_other_ticket_is_422(self, client):
        first = _create_ticket(client)
        other = _create_ticket(client)
        body = {"entries": [{"amount": "300", "payment_method": "cash"}]}
        headers = {"Idempotency-Key": "shared-key"}

        client.post(f"/v1/tickets/{first['id']}/payments", json=body, headers=headers)
        response = client.post(f"/v1/tickets/{other['id']}/payments", json=body, headers=headers)
        assert response.status_code == 422

    def test_list_payments_not_found(self, client):
        response = client.get(f"/v1/tickets/{uuid4()}/payments")
        assert response.status_code == 404


class TestPaymentPreview:
    def test_preview_counts_existing_payments(self, client):
        ticket = _create_ticket(client, price="1500")
        client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "1000", "payment_method": "cash"}]},
        )

        response = client.post(
            f"/v1/tickets/{ticket['id']}/payment_preview",
            json={"transfer_amount": "200", "card_amount": "300", "terminal_amount": "0"},
        )
        assert response.status_code == 200
        data = response.json()
        assert [e["payment_method"] for e in data["entries"]] == ["bank_transfer", "visa"]
        assert Decimal(data["existing_total"]) == Decimal("1000")
        assert Decimal(data["current_entry_total"]) == Decimal("500")
        assert Decimal(data["remaining"]) == Decimal("0")
        assert data["projected_status"] == "paid"

    def test_preview_stores_nothing(self, client, db_session):
        ticket = _create_ticket(client, price="1500")
        client.post(f"/v1/tickets/{ticket['id']}/payment_preview", json={"cash_amount": "100"})
        assert db_session.query(TicketPayment).count() == 0

    def test_preview_rejects_negative(self, client):
        ticket = _create_ticket(client)
        response = client.post(
            f"/v1/tickets/{ticket['id']}/payment_preview", json={"cash_amount": "-1"}
        )
        assert response.status_code == 422

    def test_preview_rejects_sub_cent_amount(self, client):
        ticket = _create_ticket(client)
        response = client.post(
            f"/v1/tickets/{ticket['id']}/payment_preview", json={"card_amount": "10.001"}
        )
        assert response.status_code == 422

    def test_preview_not_found(self, client):
        response = client.post(f"/v1/tickets/{uuid4()}/payment_preview", json={})
        assert response.status_code == 404


class TestSummaryAndReconcile:
    def test_summary(self, client):
        pending = _create_ticket(client, price="1000")
        paid = _create_ticket(client, price="500")
        client.post(
            f"/v1/tickets/{pending['id']}/payments",
            json={"entries": [{"amount": "400", "payment_method": "cash"}]},
        )
        client.post(
            f"/v1/tickets/{paid['id']}/payments",
            json={
                "entries": [
                    {"amount": "200", "payment_method": "cash"},
                    {"amount": "300", "payment_method": "terminal"},
                ]
            },
        )

        response = client.get("/v1/tickets/summary")
        assert response.status_code == 200
        data = response.json()
        assert data["currency"] == "UZS"
        assert data["unpaid"]["count"] == 1
        assert Decimal(data["unpaid"]["total_price"]) == Decimal("1000")
        assert Decimal(data["unpaid"]["total_paid"]) == Decimal("400")
        assert Decimal(data["unpaid"]["total_remaining"]) == Decimal("600")
        assert data["paid_count"] == 1
        totals = {t["payment_method"]: t for t in data["by_payment_method"]}
        assert Decimal(totals["cash"]["total"]) == Decimal("600")
        assert totals["cash"]["count"] == 2
        assert totals["cash"]["label"] == "Наличные"
        assert Decimal(totals["terminal"]["total"]) == Decimal("300")

    def test_reconcile_endpoint(self, client):
        ticket = _create_ticket(client, price="1000")
        client.post(
            f"/v1/tickets/{ticket['id']}/payments",
            json={"entries": [{"amount": "1000", "payment_method": "cash"}]},
        )
        response = client.post(f"/v1/tickets/{ticket['id']}/reconcile")
        assert response.status_code == 200
        assert response.json()["changed"] is False
        assert response.json()["payment_status"] == "paid"

    def test_reconcile_not_found(self, client):
        response = client.post(f"/v1/tickets/{uuid4()}/reconcile")
        assert response.status_code == 404


class TestAgentPerformanceAPI:
    def test_agent_performance(self, client):
        _create_ticket(client, price="1000")
        _create_ticket(client, price="2500", service_type="tour")
        _create_ticket(client, price="400", agent_id="agent-2", agent_name="Sardor")

        response = client.get("/v1/tickets/agent_performance", params={"days": 30})
        assert response.status_code == 200
        data = response.json()
        assert [a["agent_id"] for a in data] == ["agent-1", "agent-2"]
        assert data[0]["total_count"] == 2
        assert Decimal(data[0]["total_revenue"]) == Decimal("3500")
        assert Decimal(data[0]["average_price"]) == Decimal("1750")

    def test_agent_performance_rejects_non_positive_days(self, client):
        response = client.get("/v1/tickets/agent_performance", params={"days": 0})
        assert response.status_code == 422

    def test_list_overpaid_tickets(self, client):
        overpaid = _create_ticket(client, price="1000")
        _create_ticket(client, price="1000")
        client.post(
            f"/v1/tickets/{overpaid['id']}/payments",
            json={"entries": [{"amount": "1500", "payment_method": "cash"}]},
        )

        response = client.get("/v1/tickets/", params={"overpaid": "true"})
        data = response.json()
        assert response.headers["X-Total-Count"] == "1"
        assert data[0]["id"] == overpaid["id"]
        assert data[0]["payment_status"] == "pending"
        assert Decimal(data[0]["remaining"]) == Decimal("-500")
