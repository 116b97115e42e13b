"""Business logic for ephemeral pet stories."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..config import get_settings
from ..models import Story, StoryView, User
from ..schemas import PetResponse, StoryCreate
from .pet_service import require_own_pet


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_story(db: Session, *, author: User, payload: StoryCreate) -> Story:
    require_own_pet(db, user_id=author.id, pet_id=payload.pet_id)

    now = _now()
    story = Story(
        pet_id=payload.pet_id,
        user_id=author.id,
        media_url=payload.media_url.strip(),
        media_type=payload.media_type,
        caption=(payload.caption or "").strip() or None,
        created_at=now,
        expires_at=now + timedelta(hours=max(1, get_settings().story_ttl_hours)),
    )
    db.add(story)
    db.commit()
    db.refresh(story)
    return story


def list_story_groups(db: Session, *, viewer_id: UUID | None) -> list[dict[str, Any]]:
    """Group active stories by pet.

    Groups holding at least one story the viewer has not seen come first;
    ties are broken by the group's newest story.
    """

    statement = (
        select(Story)
        .options(selectinload(Story.pet))
        .where(Story.expires_at > _now())
        .order_by(Story.created_at.desc())
    )
    stories = list(db.scalars(statement))

    viewed: set[UUID] = set()
    if viewer_id is not None and stories:
        viewed = set(
            db.scalars(
                select(StoryView.story_id).where(
                    StoryView.viewer_user_id == viewer_id,
                    StoryView.story_id.in_([story.id for story in stories]),
                )
            )
        )

    grouped: dict[UUID, dict[str, Any]] = {}
    for story in stories:
        if story.pet is None:
            continue
        bucket = grouped.get(story.pet_id)
        if bucket is None:
            bucket = {
                "pet": PetResponse.model_validate(story.pet).model_dump(),
                "stories": [],
                "has_unviewed": False,
                "latest": story.created_at,
            }
            grouped[story.pet_id] = bucket
        seen = story.id in viewed
        bucket["stories"].append(
            {
                "id": story.id,
                "pet_id": story.pet_id,
                "user_id": story.user_id,
                "media_url": story.media_url,
                "media_type": story.media_type,
                "caption": story.caption,
                "created_at": story.created_at,
                "expires_at": story.expires_at,
                "viewed": seen,
            }
        )
        if not seen:
            bucket["has_unviewed"] = True

    # Stories arrive newest first, so ``latest`` is each group's first story.
    ordered = sorted(grouped.values(), key=lambda item: item["latest"], reverse=True)
    ordered.sort(key=lambda item: not item["has_unviewed"])
    for bucket in ordered:
        bucket.pop("latest")
    return ordered


def mark_story_viewed(db: Session, *, story_id: UUID, viewer_id: UUID) -> bool:
    """Record a view; returns ``False`` when it was already recorded."""

    if db.get(Story, story_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Story not found")

    existing = db.scalar(
        select(StoryView.id).where(StoryView.story_id == story_id, StoryView.viewer_user_id == viewer_id)
    )
    if existing is not None:
        return False

    db.add(StoryView(story_id=story_id, viewer_user_id=viewer_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


__all__ = ["create_story", "list_story_groups", "mark_story_viewed"]
