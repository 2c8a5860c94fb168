"""
Tests for transaction endpoints.
"""
from decimal import Decimal
import pytest
from fastapi.testclient import TestClient
from splitledger.core.exceptions import ValidationError
from splitledger.main import app
from splitledger.services import transaction_service


def _post(client, **overrides):
    payload = {
        "type": "expense",
        "amount": "12.50",
        "description": "Coffee beans",
        "category": "food",
        "date": "2024-03-10T12:00:00",
        "paidBy": "Alice",
    }
    payload.update(overrides)
    return client.post("/api/transactions", json=payload)


def test_requires_bearer_token(db_session):
    anonymous = TestClient(app)

    assert anonymous.get("/api/transactions").status_code == 401


def test_rejects_invalid_token(client):
    response = client.get("/api/transactions", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_create_transaction(client, publisher):
    """Test transaction creation."""
    response = _post(client)

    assert response.status_code == 201
    body = response.json()
    assert Decimal(body["amount"]) == Decimal("12.50")
    assert body["paidBy"] == "Alice"
    assert body["isShared"] is False
    assert body["splits"] == []
    assert publisher.events() == ["transaction_created"]
    assert publisher.messages[0]["data"]["paidBy"] == "Alice"


def test_create_transaction_validation(client, db_session):
    assert _post(client, amount="0").status_code == 422
    assert _post(client, amount="-5").status_code == 422
    assert _post(client, description="").status_code == 422
    assert _post(client, type="transfer").status_code == 422
    assert client.get("/api/transactions").json() == []


def test_list_transactions_newest_first(client):
    _post(client, description="Older", date="2024-03-01T08:00:00")
    _post(client, description="Newer", date="2024-03-20T08:00:00")

    response = client.get("/api/transactions")

    assert [t["description"] for t in response.json()] == ["Newer", "Older"]


def test_list_transactions_filters_are_conjunctive(client):
    _post(client, type="income", amount="100", description="Salary", category="salary")
    _post(client, description="Lunch", paidBy="Bob")
    _post(client, description="Rent", category="housing", date="2024-04-01T08:00:00")

    expenses = client.get("/api/transactions", params={"type": "expense"}).json()
    march_food = client.get("/api/transactions", params={
        "category": "food", "startDate": "2024-03-01", "endDate": "2024-03-31"
    }).json()
    by_bob = client.get("/api/transactions", params={"paidBy": "Bob", "type": "income"}).json()

    assert {t["description"] for t in expenses} == {"Lunch", "Rent"}
    assert [t["description"] for t in march_food] == ["Lunch"]
    assert by_bob == []


def test_end_date_covers_whole_day(client):
    _post(client, description="Late", date="2024-03-31T23:45:00")

    response = client.get("/api/transactions", params={"endDate": "2024-03-31"})

    assert [t["description"] for t in response.json()] == ["Late"]


def test_search_matches_description_and_payer(client):
    _post(client, description="Coffee beans")
    _post(client, description="Train", paidBy="Coffeeman")
    _post(client, description="Books")

    response = client.get("/api/transactions", params={"search": "coffee"})

    assert {t["description"] for t in response.json()} == {"Coffee beans", "Train"}


def test_search_treats_wildcards_literally(client):
    _post(client, description="100% juice")
    _post(client, description="Water")

    response = client.get("/api/transactions", params={"search": "%"})

    assert [t["description"] for t in response.json()] == ["100% juice"]


def test_get_unknown_transaction(client):
    response = client.get("/api/transactions/999")

    assert response.status_code == 404
    assert response.json()["error"] == "Transaction not found"


def test_update_transaction(client, publisher):
    created = _post(client).json()

    response = client.put(f"/api/transactions/{created['id']}", json={
        "description": "Espresso",
        "category": "drinks",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["description"] == "Espresso"
    assert body["category"] == "drinks"
    assert Decimal(body["amount"]) == Decimal("12.50")
    assert body["updatedAt"] >= created["updatedAt"]
    assert "transaction_updated" in publisher.events()


def test_update_rejects_invalid_amount(client):
    created = _post(client).json()

    response = client.put(f"/api/transactions/{created['id']}", json={"amount": "0"})

    assert response.status_code == 422


def test_delete_transaction(client, publisher):
    created = _post(client).json()

    response = client.delete(f"/api/transactions/{created['id']}")

    assert response.status_code == 200
    assert client.delete(f"/api/transactions/{created['id']}").status_code == 404
    assert publisher.messages[-1]["event"] == "transaction_deleted"
    assert publisher.messages[-1]["data"] == {"id": created["id"]}


def test_sub_cent_amount_is_rejected(client, db_session):
    """An amount that rounds to zero is refused rather than stored as 0.00."""
    assert _post(client, amount="0.004").status_code == 422
    assert _post(client, amount="0.005").status_code == 201
    assert [Decimal(t["amount"]) for t in client.get("/api/transactions").json()] == [Decimal("0.01")]


def test_sub_cent_update_is_rejected(client):
    created = _post(client).json()

    response = client.put(f"/api/transactions/{created['id']}", json={"amount": "0.004"})

    assert response.status_code == 422
    assert Decimal(client.get(f"/api/transactions/{created['id']}").json()["amount"]) == Decimal("12.50")


def test_oversized_amount_is_rejected(client):
    huge = _post(client, amount="1e30")
    over_column = _post(client, amount="10000000000.00")

    assert huge.status_code == 422
    assert huge.json()["details"]["field"] == "amount"
    assert over_column.status_code == 422
    assert _post(client, amount="9999999999.99").status_code == 201


def test_validate_amount_rejects_non_finite():
    with pytest.raises(ValidationError):
        transaction_service._validate_amount("Infinity")
    with pytest.raises(ValidationError):
        transaction_service._validate_amount("NaN")
    assert transaction_service._validate_amount("0.015") == Decimal("0.02")
