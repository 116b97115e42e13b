"""Notification API routes."""
from __future__ import annotations

import json
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import NotificationListResponse, NotificationResponse, NotificationSummaryResponse
from ..services import (
    count_unread_notifications,
    decode_access_token,
    get_current_user,
    hub,
    list_notifications,
    mark_all_read,
    mark_read,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("", response_model=NotificationListResponse)
async def list_my_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationListResponse:
    records = list_notifications(db, current_user.id)
    return NotificationListResponse(items=[NotificationResponse.model_validate(item) for item in records])


@router.get("/summary", response_model=NotificationSummaryResponse)
async def notification_summary_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationSummaryResponse:
    return NotificationSummaryResponse(unread_count=count_unread_notifications(db, current_user.id))


@router.post("/mark-read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> None:
    mark_all_read(db, current_user.id)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationResponse:
    return NotificationResponse.model_validate(mark_read(db, user_id=current_user.id, notification_id=notification_id))


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(..., alias="token"),
) -> None:
    try:
        user_id = decode_access_token(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await hub.connect(websocket, str(user_id))
    await websocket.send_text(json.dumps({"type": "ready"}))
    try:
        while True:
            try:
                payload = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if payload.strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    finally:
        await hub.disconnect(websocket)
        logger.info("Notification socket closed for %s", user_id)
