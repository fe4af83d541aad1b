"""WebSocket endpoint for live lead updates.

- WS /api/v1/ws?token=<jwt> → joins the "leads" channel

Server → client: {"event": "connected" | "lead-created" | "lead-updated" | "lead-deleted", "data": ...}
Client → server: {"event": "lead-updated", "data": ...} is relayed to every other session;
"ping" is answered with "pong".
"""

import asyncio
import json
import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from app.services.auth import verify_token
from app.services.broadcaster import LEAD_UPDATED, LEADS_CHANNEL, Subscription, broadcaster

router = APIRouter()
logger = logging.getLogger(__name__)

RELAYED_EVENTS = {LEAD_UPDATED}


def _handshake_token(websocket: WebSocket, token: Optional[str]) -> Optional[str]:
    if token:
        return token
    header = websocket.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


async def _pump(websocket: WebSocket, subscription: Subscription) -> None:
    """Forward queued channel events to the socket until cancelled."""
    while True:
        message = await subscription.queue.get()
        await websocket.send_json(message)


async def _stop_pump(sender: asyncio.Task) -> None:
    """Cancel the forwarding task and collect its outcome."""
    sender.cancel()
    await asyncio.wait([sender])
    if not sender.cancelled() and sender.exception() is not None:
        logger.warning("Event forwarding stopped: %r", sender.exception())


async def _handle_client_message(websocket: WebSocket, subscription: Subscription, raw: str) -> None:
    if raw == "ping":
        await websocket.send_text("pong")
        return
    try:
        message = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring non-JSON message from subscriber %d", subscription.id)
        return
    if not isinstance(message, dict) or message.get("event") not in RELAYED_EVENTS:
        logger.debug("Ignoring message from subscriber %d: %r", subscription.id, raw[:100])
        return
    broadcaster.publish(LEADS_CHANNEL, message["event"], message.get("data"), exclude=subscription)


@router.websocket("/ws")
async def leads_ws(websocket: WebSocket, token: Optional[str] = Query(None)):
    identity = verify_token(_handshake_token(websocket, token))
    if identity is None:
        logger.warning("Rejected WebSocket connection: invalid or missing token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    subscription = broadcaster.join(LEADS_CHANNEL, owner=identity.user_id)
    sender: Optional[asyncio.Task] = None
    try:
        await websocket.accept()
        await websocket.send_json({
            "event": "connected",
            "data": {"userId": str(identity.user_id), "role": identity.role.value},
        })
        logger.info("Live client connected: user %s", identity.user_id)

        sender = asyncio.create_task(_pump(websocket, subscription))
        while True:
            raw = await websocket.receive_text()
            await _handle_client_message(websocket, subscription, raw)
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.leave(LEADS_CHANNEL, subscription)
        if sender is not None:
            await _stop_pump(sender)
        logger.info("Live client disconnected: user %s", identity.user_id)
