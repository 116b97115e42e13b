"""Automated cleanup utilities for pruning expired social data."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Story, StoryView
from .notification_service import delete_old_notifications

logger = logging.getLogger(__name__)


class CleanupError(RuntimeError):
    """Raised when the cleanup task cannot complete successfully."""


@dataclass(frozen=True, slots=True)
class CleanupSummary:
    """Number of records deleted during a cleanup run."""

    stories: int
    story_views: int
    notifications: int

    @property
    def total(self) -> int:
        return self.stories + self.story_views + self.notifications


def perform_cleanup(session: Session, *, notification_retention: timedelta | None = None) -> CleanupSummary:
    """Delete expired stories (with their views) and old read notifications.

    Raises
    ------
    CleanupError
        If the cleanup process fails; the transaction is rolled back first.
    """

    if notification_retention is not None and notification_retention <= timedelta(0):
        raise ValueError("notification_retention must be a positive duration")

    now = datetime.now(timezone.utc)
    expired = select(Story.id).where(Story.expires_at <= now)

    try:
        views_deleted = _execute_delete(
            session, delete(StoryView).where(StoryView.story_id.in_(expired)).returning(StoryView.id)
        )
        stories_deleted = _execute_delete(session, delete(Story).where(Story.expires_at <= now).returning(Story.id))
        notifications_deleted = delete_old_notifications(session, older_than=notification_retention)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Cleanup failed; transaction rolled back")
        raise CleanupError("database cleanup failed") from exc

    summary = CleanupSummary(
        stories=stories_deleted,
        story_views=views_deleted,
        notifications=notifications_deleted,
    )
    logger.info(
        "Cleanup finished (stories=%d, story_views=%d, notifications=%d, total=%d)",
        summary.stories,
        summary.story_views,
        summary.notifications,
        summary.total,
    )
    return summary


def run_cleanup(
    session_factory: Callable[[], Session],
    *,
    notification_retention: timedelta | None = None,
) -> CleanupSummary:
    """Run :func:`perform_cleanup` in a session scoped to this call."""

    session = session_factory()
    try:
        return perform_cleanup(session, notification_retention=notification_retention)
    finally:
        session.close()


def _execute_delete(session: Session, statement) -> int:
    result = session.execute(statement)
    return len(result.scalars().all())


__all__ = ["CleanupError", "CleanupSummary", "perform_cleanup", "run_cleanup"]
