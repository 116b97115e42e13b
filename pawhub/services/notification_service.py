"""Notification helpers: persistence plus push to the recipient's channel."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Notification, Pet, Post, User
from ..schemas import NotificationResponse
from .realtime import hub

logger = logging.getLogger(__name__)


class NotificationType(StrEnum):
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    MENTION = "mention"
    APPOINTMENT = "appointment"
    NEW_APPOINTMENT = "new_appointment"
    ORDER = "order"
    VERIFICATION = "verification"
    CLINIC = "clinic"
    SYSTEM = "system"


def list_notifications(db: Session, user_id: UUID, *, limit: int | None = None) -> list[Notification]:
    """Return the newest notifications for ``user_id``."""

    cap = limit or get_settings().notification_limit
    stmt = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(cap)
    )
    return list(db.scalars(stmt))


def count_unread_notifications(db: Session, user_id: UUID) -> int:
    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
    )
    return int(db.scalar(stmt) or 0)


def add_notification(
    db: Session,
    *,
    user_id: UUID,
    type_: NotificationType | str,
    title: str,
    message: str | None = None,
    actor_pet_id: UUID | None = None,
    target_post_id: UUID | None = None,
    target_pet_id: UUID | None = None,
    target_order_id: UUID | None = None,
    target_appointment_id: UUID | None = None,
    target_clinic_id: UUID | None = None,
) -> Notification | None:
    """Persist a notification and push it to the recipient.

    Notification delivery never fails the action that triggered it: database
    errors are logged and ``None`` is returned.
    """

    notification = Notification(
        user_id=user_id,
        type=str(type_),
        title=title,
        message=message,
        actor_pet_id=actor_pet_id,
        target_post_id=target_post_id,
        target_pet_id=target_pet_id,
        target_order_id=target_order_id,
        target_appointment_id=target_appointment_id,
        target_clinic_id=target_clinic_id,
    )
    db.add(notification)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create %s notification for %s", type_, user_id)
        return None
    db.refresh(notification)

    hub.schedule(
        str(user_id),
        {
            "type": "notification.created",
            "notification": NotificationResponse.model_validate(notification).model_dump(mode="json"),
        },
    )
    return notification


def notify_pet_owner(
    db: Session,
    *,
    actor: User,
    pet_id: UUID,
    type_: NotificationType,
    title_suffix: str,
    actor_pet_id: UUID | None = None,
    target_post_id: UUID | None = None,
) -> Notification | None:
    """Notify the owner of ``pet_id`` about a social action, unless they did it themselves."""

    pet = db.get(Pet, pet_id)
    if pet is None or pet.user_id == actor.id:
        return None

    actor_name = "Someone"
    if actor_pet_id is not None:
        actor_pet = db.get(Pet, actor_pet_id)
        if actor_pet is not None:
            actor_name = actor_pet.name
    elif actor.display_name:
        actor_name = actor.display_name

    return add_notification(
        db,
        user_id=pet.user_id,
        type_=type_,
        title=f"{actor_name} {title_suffix}",
        actor_pet_id=actor_pet_id,
        target_post_id=target_post_id,
        target_pet_id=pet_id if target_post_id is None else None,
    )


def notify_post_owner(
    db: Session,
    *,
    actor: User,
    post: Post,
    type_: NotificationType,
    title_suffix: str,
    actor_pet_id: UUID | None = None,
) -> Notification | None:
    return notify_pet_owner(
        db,
        actor=actor,
        pet_id=post.pet_id,
        type_=type_,
        title_suffix=title_suffix,
        actor_pet_id=actor_pet_id,
        target_post_id=post.id,
    )


def mark_all_read(db: Session, user_id: UUID) -> None:
    stmt = (
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    db.execute(stmt)
    db.commit()
    hub.schedule(str(user_id), {"type": "notification.read_all"})


def mark_read(db: Session, *, user_id: UUID, notification_id: UUID) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification


def delete_old_notifications(db: Session, *, older_than: timedelta | None = None) -> int:
    """Remove read notifications older than the retention window."""

    retention = older_than or timedelta(days=get_settings().notification_retention_days)
    cutoff = datetime.now(timezone.utc) - retention
    stmt = (
        delete(Notification)
        .where(Notification.created_at < cutoff, Notification.is_read.is_(True))
        .returning(Notification.id)
    )
    result = db.execute(stmt)
    return len(result.scalars().all())


__all__ = [
    "NotificationType",
    "list_notifications",
    "count_unread_notifications",
    "add_notification",
    "notify_pet_owner",
    "notify_post_owner",
    "mark_all_read",
    "mark_read",
    "delete_old_notifications",
]
