"""Integration tests for API endpoints"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from savings_gateway.api.main import create_app
from savings_gateway.api.dependencies import get_identity_client
from savings_gateway.domain.exceptions import AuthenticationError, IdentityServiceError
from savings_gateway.infrastructure.database.models import MoneyTransaction
from savings_gateway.infrastructure.database.session import get_db


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "savings_transactions_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


def test_income_transaction_allocates_to_goals(client: TestClient, profile_row, categories, add_goal):
    """POST /v1/transactions with income funds goals by category weight"""
    add_goal("Rainy day", target_amount=1000, days_until_due=10, category=categories["Emergency"])

    response = client.post("/v1/transactions", json={"amount": 500, "note": "Salary"})

    assert response.status_code == 201
    data = response.json()
    assert data["transaction"]["amount"] == 500
    assert data["transaction"]["note"] == "Salary"
    assert data["profile"]["total_balance"] == 10500
    assert data["profile"]["today_income"] == 500
    assert data["profile"]["daily_savings_target"] == 50
    assert data["profile"]["surplus_allocation"]["allocated_to"] == "Rainy day"
    assert len(data["goals"]) == 1
    assert data["goals"][0]["saved_amount"] == pytest.approx(500)
    assert data["goals"][0]["category"] == "Emergency"


def test_expense_transaction_reports_overspending(client: TestClient, profile_row):
    """POST /v1/transactions with an expense above the stored allowance"""
    response = client.post("/v1/transactions", json={"amount": -200, "note": "Groceries"})

    assert response.status_code == 201
    data = response.json()
    assert data["profile"]["total_balance"] == 9800
    assert data["profile"]["today_expenses"] == 200
    assert data["profile"]["overspending_recovery"]["overspent"] == 50
    assert data["profile"]["daily_spending_buffer"] >= 0


def test_transaction_without_profile(client: TestClient):
    response = client.post("/v1/transactions", json={"amount": 100})
    assert response.status_code == 404


@pytest.mark.parametrize("body", [{"amount": 0}, {"note": "missing amount"}, {"amount": "lots"}])
def test_transaction_validation(client: TestClient, profile_row, body):
    response = client.post("/v1/transactions", json=body)
    assert response.status_code == 422


@pytest.mark.parametrize("raw_body", [b'{"amount": NaN}', b'{"amount": Infinity}', b'{"amount": -Infinity}'])
def test_transaction_rejects_non_finite_amount(client: TestClient, db: Session, profile_row, raw_body):
    response = client.post("/v1/transactions", content=raw_body, headers={"Content-Type": "application/json"})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "amount"]
    assert db.query(MoneyTransaction).count() == 0


def test_dashboard_endpoint(client: TestClient, profile_row, categories, add_goal):
    """GET /v1/dashboard returns profile, goals and newest transactions first"""
    add_goal("Trip", target_amount=3000, days_until_due=30, category=categories["Travel"])
    client.post("/v1/transactions", json={"amount": 1000, "note": "first"})
    client.post("/v1/transactions", json={"amount": -50, "note": "second"})

    response = client.get("/v1/dashboard")

    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["total_balance"] == 10950
    assert data["goals"][0]["name"] == "Trip"
    assert data["goals"][0]["category"] == "Travel"
    assert len(data["transactions"]) == 2
    assert {t["note"] for t in data["transactions"]} == {"first", "second"}


def test_dashboard_without_profile(client: TestClient):
    assert client.get("/v1/dashboard").status_code == 404


def test_create_goal(client: TestClient, categories):
    """POST /v1/goals creates an unfunded, on-track goal"""
    response = client.post(
        "/v1/goals",
        json={"name": "New bike", "target_amount": 900, "duration": 30, "category": "Gadgets"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "New bike"
    assert data["saved_amount"] == 0
    assert data["status"] == "ON_TRACK"
    assert data["days_offset"] == 0
    assert data["status_message"] == "Goal created. Start saving!"
    assert data["category"] == "Gadgets"
    assert data["category_weight"] == 0.2

    listed = client.get("/v1/goals").json()
    assert [goal["name"] for goal in listed] == ["New bike"]


def test_create_goal_invalid_category(client: TestClient, categories):
    response = client.post(
        "/v1/goals",
        json={"name": "Yacht", "target_amount": 900, "duration": 30, "category": "Luxury"},
    )
    assert response.status_code == 400
    assert "Invalid category" in response.json()["detail"]


def test_create_goal_validation(client: TestClient, categories):
    response = client.post(
        "/v1/goals",
        json={"name": "Yacht", "target_amount": 0, "duration": 0, "category": "Travel"},
    )
    assert response.status_code == 422


def test_list_categories(client: TestClient, categories):
    response = client.get("/v1/categories")

    assert response.status_code == 200
    assert {(c["name"], c["weight"]) for c in response.json()} == {
        ("Emergency", 0.5),
        ("Travel", 0.3),
        ("Gadgets", 0.2),
    }


@pytest.fixture
def unauthenticated_client(db: Session):
    """Client that goes through bearer-token verification with a mocked identity provider"""
    app = create_app()
    identity_client = AsyncMock()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: identity_client
    return TestClient(app), identity_client


def test_missing_token_is_rejected(unauthenticated_client):
    client, _ = unauthenticated_client
    response = client.post("/v1/transactions", json={"amount": 100})
    assert response.status_code == 401


def test_valid_token_resolves_user(unauthenticated_client, profile_row):
    client, identity_client = unauthenticated_client
    identity_client.get_user_id.return_value = profile_row.id

    response = client.get("/v1/dashboard", headers={"Authorization": "Bearer good-token"})

    assert response.status_code == 200
    identity_client.get_user_id.assert_awaited_once_with("good-token")


def test_rejected_token(unauthenticated_client):
    client, identity_client = unauthenticated_client
    identity_client.get_user_id.side_effect = AuthenticationError("Invalid token")

    response = client.get("/v1/goals", headers={"Authorization": "Bearer bad-token"})

    assert response.status_code == 401


def test_identity_service_down(unauthenticated_client):
    client, identity_client = unauthenticated_client
    identity_client.get_user_id.side_effect = IdentityServiceError("timeout")

    response = client.get("/v1/goals", headers={"Authorization": "Bearer any"})

    assert response.status_code == 503


def test_categories_are_public(unauthenticated_client, categories):
    client, _ = unauthenticated_client
    assert client.get("/v1/categories").status_code == 200


class _LateEveningUtc(datetime):
    """Clock pinned to 23:30 UTC, when local and UTC dates often disagree"""

    @classmethod
    def now(cls, tz=None):
        return datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc)


def test_create_goal_due_date_counts_from_utc_today(client: TestClient, categories, monkeypatch):
    monkeypatch.setattr("savings_gateway.api.v1.goals.datetime", _LateEveningUtc)

    response = client.post(
        "/v1/goals",
        json={"name": "Concert", "target_amount": 200, "duration": 30, "category": "Travel"},
    )

    assert response.status_code == 201
    assert response.json()["target_date"] == "2026-03-31"
