"""WebSocket endpoint that emits realtime feed change events."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..services.realtime import FEED_CHANNEL, hub

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws/feed")
async def feed_updates(websocket: WebSocket) -> None:
    """Maintain a long-lived connection that pushes change events."""

    await hub.connect(websocket, FEED_CHANNEL)
    logger.info("Feed socket connected from %s", websocket.client)
    try:
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            try:
                payload = json.loads(raw)
            except json.JSONDecodeError:
                payload = {"type": raw}
            if not isinstance(payload, dict):
                continue

            message_type = str(payload.get("type") or "").lower()
            if message_type == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
            elif message_type == "hello":
                await websocket.send_text(json.dumps({"type": "ready"}))
    finally:
        await hub.disconnect(websocket)
        logger.info("Feed socket disconnected from %s", websocket.client)
