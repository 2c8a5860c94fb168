"""
Tests for the event publisher and the WebSocket stream.
"""
import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect
from splitledger.core.security import create_access_token
from splitledger.main import app
from splitledger.schemas.common import WarningResponse
from splitledger.services.event_service import EventPublisher


def test_publish_without_subscribers():
    message = EventPublisher().publish("group_created", {"id": 1})

    assert message["event"] == "group_created"
    assert message["data"] == {"id": 1}
    assert message["timestamp"].endswith("Z")


def test_publish_fans_out_and_encodes_camel_case():
    publisher = EventPublisher()
    first, second = [], []
    publisher.subscribe(first.append)
    publisher.subscribe(second.append)

    publisher.publish("transaction_created", WarningResponse(operation="op", message="m", entity_id=7))

    assert first == second
    assert first[0]["data"] == {"operation": "op", "message": "m", "entityId": 7}


def test_failing_subscriber_does_not_stop_delivery():
    publisher = EventPublisher()
    received = []

    def broken(message):
        raise RuntimeError("socket gone")

    publisher.subscribe(broken)
    publisher.subscribe(received.append)

    publisher.publish("member_joined", {})

    assert len(received) == 1


def test_unsubscribe():
    publisher = EventPublisher()
    received = []
    publisher.subscribe(received.append)
    publisher.unsubscribe(received.append)
    publisher.unsubscribe(received.append)

    publisher.publish("group_created", {})

    assert received == []
    assert publisher.subscriber_count == 0


def test_websocket_sends_welcome_and_events():
    token = create_access_token({"sub": "tester"})
    with TestClient(app) as client:
        with client.websocket_connect(f"/api/ws?token={token}") as websocket:
            welcome = websocket.receive_json()
            assert welcome["event"] == "connected"

            app.state.events.publish("invite_deactivated", {"id": 3})

            assert websocket.receive_json()["data"] == {"id": 3}


def test_websocket_requires_token():
    with TestClient(app) as client:
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/api/ws") as websocket:
                websocket.receive_json()
