"""Post, like and comment API routes."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeRequest,
    PostCreate,
    PostEngagementResponse,
    PostFeedResponse,
    PostResponse,
)
from ..services import (
    create_comment,
    create_post,
    delete_comment,
    delete_post,
    get_current_user,
    get_optional_user,
    hub,
    list_comments,
    list_feed,
    set_like_state,
)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=PostFeedResponse)
async def feed_endpoint(
    feed: Literal["all", "following", "pet"] = Query(default="all"),
    pet_id: UUID | None = Query(default=None),
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> PostFeedResponse:
    seq = hub.last_seq
    records = list_feed(db, viewer_id=viewer.id if viewer else None, feed_type=feed, pet_id=pet_id)
    return PostFeedResponse.model_validate({"items": records, "seq": seq})


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    return PostResponse.model_validate(create_post(db, author=current_user, payload=payload))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    delete_post(db, post_id=post_id, requester=current_user)


@router.post("/{post_id}/like", response_model=PostEngagementResponse)
async def like_post_endpoint(
    post_id: UUID,
    payload: LikeRequest | None = Body(default=None),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostEngagementResponse:
    snapshot = set_like_state(
        db,
        post_id=post_id,
        user=current_user,
        should_like=True,
        pet_id=payload.pet_id if payload else None,
    )
    return PostEngagementResponse(**snapshot)


@router.delete("/{post_id}/like", response_model=PostEngagementResponse)
async def unlike_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostEngagementResponse:
    snapshot = set_like_state(db, post_id=post_id, user=current_user, should_like=False)
    return PostEngagementResponse(**snapshot)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(post_id: UUID, db: Session = Depends(get_session)) -> CommentListResponse:
    comments = list_comments(db, post_id=post_id)
    return CommentListResponse(items=[CommentResponse.model_validate(comment) for comment in comments])


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CommentResponse:
    comment = create_comment(db, post_id=post_id, author=current_user, content=payload.content, pet_id=payload.pet_id)
    return CommentResponse.model_validate(comment)


@router.delete("/{post_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment_endpoint(
    post_id: UUID,
    comment_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    delete_comment(db, post_id=post_id, comment_id=comment_id, requester=current_user)
