"""
Real-time event stream over WebSocket.
"""
import asyncio
import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from splitledger.core.security import identity_from_token
from splitledger.core.utils import utcnow
from splitledger.services.event_service import EventPublisher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


@router.websocket("/ws")
async def event_stream(websocket: WebSocket, token: Optional[str] = Query(None)):
    """
    Forward every published event to the connected client.

    Browsers cannot set headers on a WebSocket handshake, so the bearer
    token is passed as the `token` query parameter.
    """
    identity = identity_from_token(token) if token else None
    if not identity:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    events: EventPublisher = websocket.app.state.events
    await websocket.accept()

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def forward(message: Dict[str, Any]) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, message)

    events.subscribe(forward)
    logger.info(f"Event stream opened for {identity} ({events.subscriber_count} subscribers)")

    async def receive_until_closed():
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass

    async def send_events():
        while True:
            message = await queue.get()
            await websocket.send_json(message)

    try:
        await websocket.send_json({
            "event": "connected",
            "data": {"message": "Connected to event stream"},
            "timestamp": utcnow().isoformat() + "Z",
        })
        reader = asyncio.create_task(receive_until_closed())
        sender = asyncio.create_task(send_events())
        done, pending = await asyncio.wait({reader, sender}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.warning(f"Event stream for {identity} closed with error: {task.exception()}")
    finally:
        events.unsubscribe(forward)
        logger.info(f"Event stream closed for {identity}")
