"""Schemas for notifications."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .common import UtcDateTime


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str | None = None
    actor_pet_id: UUID | None = None
    target_post_id: UUID | None = None
    target_pet_id: UUID | None = None
    target_order_id: UUID | None = None
    target_appointment_id: UUID | None = None
    target_clinic_id: UUID | None = None
    is_read: bool
    created_at: UtcDateTime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]


class NotificationSummaryResponse(BaseModel):
    unread_count: int = 0


__all__ = ["NotificationResponse", "NotificationListResponse", "NotificationSummaryResponse"]
