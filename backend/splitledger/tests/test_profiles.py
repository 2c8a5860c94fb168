"""
Tests for user profile endpoints.
"""
from fastapi.testclient import TestClient
from splitledger.core.security import create_access_token
from splitledger.main import app


def _headers_for(identity):
    return {"Authorization": f"Bearer {create_access_token({'sub': identity})}"}


def test_create_profile(client, publisher):
    """Test profile creation with settings defaults."""
    response = client.post("/api/profile", json={"publicName": "ali", "email": "ali@example.com"})

    assert response.status_code == 201
    body = response.json()
    assert body["userId"] == "tester"
    assert body["currency"] == "PKR"
    assert body["language"] == "en"
    assert "profile_created" in publisher.events()


def test_currency_and_language_are_normalized(client):
    response = client.post("/api/profile", json={"publicName": "ali", "currency": "usd", "language": "EN-GB"})

    assert response.json()["currency"] == "USD"
    assert response.json()["language"] == "en-gb"


def test_duplicate_public_name(client):
    client.post("/api/profile", json={"publicName": "ali"})

    response = client.post("/api/profile", json={"publicName": "ali"}, headers=_headers_for("someone-else"))

    assert response.status_code == 409
    assert response.json()["error"] == "Public name already taken"


def test_second_profile_for_same_user(client):
    client.post("/api/profile", json={"publicName": "ali"})

    response = client.post("/api/profile", json={"publicName": "ali2"})

    assert response.status_code == 409


def test_get_own_profile(client):
    assert client.get("/api/profile").status_code == 404

    created = client.post("/api/profile", json={"publicName": "ali"}).json()

    assert client.get("/api/profile").json()["id"] == created["id"]
    assert client.get(f"/api/profile/{created['id']}").json()["publicName"] == "ali"


def test_update_profile_rechecks_public_name(client, publisher):
    mine = client.post("/api/profile", json={"publicName": "ali"}).json()
    client.post("/api/profile", json={"publicName": "sara"}, headers=_headers_for("sara-id"))

    taken = client.patch(f"/api/profile/{mine['id']}", json={"publicName": "sara"})
    unchanged = client.patch(f"/api/profile/{mine['id']}", json={"publicName": "ali", "currency": "eur"})

    assert taken.status_code == 409
    assert unchanged.status_code == 200
    assert unchanged.json()["currency"] == "EUR"
    assert "profile_updated" in publisher.events()


def test_delete_profile(client):
    created = client.post("/api/profile", json={"publicName": "ali"}).json()

    assert client.delete(f"/api/profile/{created['id']}").status_code == 200
    assert client.get(f"/api/profile/{created['id']}").status_code == 404


def test_profile_requires_identity(db_session):
    anonymous = TestClient(app)

    assert anonymous.post("/api/profile", json={"publicName": "ali"}).status_code == 401
