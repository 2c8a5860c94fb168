"""
Shared fixtures: an in-memory SQLite database and an authenticated client.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from splitledger.core.security import create_access_token
from splitledger.db.base import Base
from splitledger.db.session import get_db
from splitledger.main import app
from splitledger.api.dependencies import get_event_publisher
from splitledger.services.event_service import EventPublisher
import splitledger.models  # noqa: F401

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingPublisher(EventPublisher):
    """Publisher that also keeps every message it sends."""

    def __init__(self):
        super().__init__()
        self.messages = []

    def publish(self, event, data):
        message = super().publish(event, data)
        self.messages.append(message)
        return message

    def events(self):
        return [message["event"] for message in self.messages]


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "tester"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db_session, publisher, auth_headers):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    with TestClient(app) as test_client:
        test_client.headers.update(auth_headers)
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def group(client):
    """A group with three members: Alice, Bob and Carol."""
    response = client.post("/api/groups", json={
        "name": "Flat 4B",
        "members": [
            {"name": "Alice", "email": "alice@example.com"},
            {"name": "Bob"},
            {"name": "Carol", "openingBalance": "50.00"},
        ],
    })
    assert response.status_code == 201
    return response.json()
