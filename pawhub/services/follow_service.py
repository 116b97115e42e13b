"""Business logic for pet follow edges."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Follow, User
from ..schemas import PetFollowEvent
from .notification_service import NotificationType, notify_pet_owner
from .pet_service import get_pet_or_404, require_own_pet
from .realtime import hub


@dataclass(slots=True)
class FollowStats:
    pet_id: UUID
    followers_count: int
    following_count: int
    is_following: bool


def _find_edge(db: Session, *, user_id: UUID, pet_id: UUID) -> Follow | None:
    return db.scalar(
        select(Follow).where(Follow.follower_user_id == user_id, Follow.following_pet_id == pet_id)
    )


def count_followers(db: Session, pet_id: UUID) -> int:
    return int(
        db.scalar(select(func.count()).select_from(Follow).where(Follow.following_pet_id == pet_id)) or 0
    )


def _publish_followers(db: Session, pet_id: UUID) -> None:
    hub.publish(PetFollowEvent(pet_id=pet_id, followers_count=count_followers(db, pet_id)))


def follow_pet(
    db: Session,
    *,
    follower: User,
    pet_id: UUID,
    follower_pet_id: UUID | None = None,
) -> bool:
    """Create the follow edge; returns ``False`` when it already existed."""

    get_pet_or_404(db, pet_id)
    if follower_pet_id is not None:
        require_own_pet(db, user_id=follower.id, pet_id=follower_pet_id)

    if _find_edge(db, user_id=follower.id, pet_id=pet_id) is not None:
        return False

    db.add(Follow(follower_user_id=follower.id, follower_pet_id=follower_pet_id, following_pet_id=pet_id))
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same edge first.
        db.rollback()
        return False
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to follow pet") from exc

    _publish_followers(db, pet_id)
    notify_pet_owner(
        db,
        actor=follower,
        pet_id=pet_id,
        type_=NotificationType.FOLLOW,
        title_suffix="started following your pet",
        actor_pet_id=follower_pet_id,
    )
    return True


def unfollow_pet(db: Session, *, follower: User, pet_id: UUID) -> bool:
    """Delete the follow edge; returns ``False`` when there was none."""

    record = _find_edge(db, user_id=follower.id, pet_id=pet_id)
    if record is None:
        return False
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to unfollow pet") from exc

    _publish_followers(db, pet_id)
    return True


def get_follow_stats(db: Session, *, pet_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    """Derive follower/following counts for a pet by counting edges.

    ``following_count`` counts the edges created by the pet's owner, since a
    user follows on behalf of all of their pets.
    """

    pet = get_pet_or_404(db, pet_id)

    following_count = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_user_id == pet.user_id)
    ) or 0

    is_following = False
    if viewer_id is not None:
        is_following = _find_edge(db, user_id=viewer_id, pet_id=pet_id) is not None

    return FollowStats(
        pet_id=pet_id,
        followers_count=count_followers(db, pet_id),
        following_count=int(following_count),
        is_following=is_following,
    )


def followed_pet_ids(db: Session, *, user_id: UUID) -> list[UUID]:
    return list(db.scalars(select(Follow.following_pet_id).where(Follow.follower_user_id == user_id)))


__all__ = [
    "FollowStats",
    "follow_pet",
    "unfollow_pet",
    "get_follow_stats",
    "count_followers",
    "followed_pet_ids",
]
