"""Follow management API routes."""
from __future__ import annotations

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import FollowActionResponse, FollowRequest, FollowStatsResponse
from ..services import follow_pet, get_current_user, get_follow_stats, get_optional_user, hub, unfollow_pet

router = APIRouter(prefix="/follows", tags=["follows"])


@router.post("/{pet_id}", response_model=FollowActionResponse, status_code=status.HTTP_201_CREATED)
async def follow_pet_endpoint(
    pet_id: UUID,
    payload: FollowRequest | None = Body(default=None),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowActionResponse:
    follower_pet_id = payload.follower_pet_id if payload else None
    changed = follow_pet(db, follower=current_user, pet_id=pet_id, follower_pet_id=follower_pet_id)
    seq = hub.last_seq
    stats = get_follow_stats(db, pet_id=pet_id, viewer_id=current_user.id)
    return FollowActionResponse(**asdict(stats), seq=seq, status="followed" if changed else "noop")


@router.delete("/{pet_id}", response_model=FollowActionResponse)
async def unfollow_pet_endpoint(
    pet_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowActionResponse:
    changed = unfollow_pet(db, follower=current_user, pet_id=pet_id)
    seq = hub.last_seq
    stats = get_follow_stats(db, pet_id=pet_id, viewer_id=current_user.id)
    return FollowActionResponse(**asdict(stats), seq=seq, status="unfollowed" if changed else "noop")


@router.get("/stats/{pet_id}", response_model=FollowStatsResponse)
async def follow_stats_endpoint(
    pet_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> FollowStatsResponse:
    seq = hub.last_seq
    stats = get_follow_stats(db, pet_id=pet_id, viewer_id=viewer.id if viewer else None)
    return FollowStatsResponse(**asdict(stats), seq=seq)
