"""Business logic for posts, likes and comments."""
from __future__ import annotations

from typing import Any, Literal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..config import get_settings
from ..models import Comment, Like, Post, User
from ..schemas import PetResponse, PostCreate, PostEngagementEvent, TableChangeEvent
from .auth_service import is_admin
from .follow_service import followed_pet_ids
from .notification_service import NotificationType, notify_post_owner
from .pet_service import require_own_pet
from .realtime import hub

FeedType = Literal["all", "following", "pet"]


def _get_post_or_404(db: Session, post_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def _serialize_post(post: Post, *, likes_count: int, comments_count: int, liked: bool) -> dict[str, Any]:
    return {
        "id": post.id,
        "pet_id": post.pet_id,
        "user_id": post.user_id,
        "content": post.content,
        "media_urls": list(post.media_urls or []),
        "media_type": post.media_type,
        "likes_count": int(likes_count or 0),
        "comments_count": int(comments_count or 0),
        "liked_by_user": bool(liked),
        "created_at": post.created_at,
        "pet": PetResponse.model_validate(post.pet).model_dump() if post.pet is not None else None,
    }


def create_post(db: Session, *, author: User, payload: PostCreate) -> dict[str, Any]:
    """Publish a post as one of the author's pets."""

    require_own_pet(db, user_id=author.id, pet_id=payload.pet_id)
    content = (payload.content or "").strip() or None
    media_urls = [url.strip() for url in payload.media_urls if url and url.strip()]
    if content is None and not media_urls:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="A post needs text or at least one media file",
        )

    post = Post(
        pet_id=payload.pet_id,
        user_id=author.id,
        content=content,
        media_urls=media_urls,
        media_type=payload.media_type,
    )
    db.add(post)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create post") from exc
    db.refresh(post)
    hub.publish(TableChangeEvent(table="posts", event="INSERT", row_id=post.id))
    return _serialize_post(post, likes_count=0, comments_count=0, liked=False)


def list_feed(
    db: Session,
    *,
    viewer_id: UUID | None,
    feed_type: FeedType = "all",
    pet_id: UUID | None = None,
) -> list[dict[str, Any]]:
    """Return the newest posts with derived counters and the viewer's like state."""

    like_count = select(func.count(Like.id)).where(Like.post_id == Post.id).scalar_subquery()
    comment_count = select(func.count(Comment.id)).where(Comment.post_id == Post.id).scalar_subquery()
    columns = [Post, like_count.label("likes_count"), comment_count.label("comments_count")]
    if viewer_id is not None:
        viewer_like = (
            select(func.count(Like.id))
            .where(Like.post_id == Post.id, Like.user_id == viewer_id)
            .scalar_subquery()
        )
        columns.append(viewer_like.label("liked"))

    statement = (
        select(*columns)
        .options(selectinload(Post.pet))
        .order_by(Post.created_at.desc())
        .limit(get_settings().feed_limit)
    )

    if feed_type == "pet":
        if pet_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="pet_id is required for a pet feed")
        statement = statement.where(Post.pet_id == pet_id)
    elif feed_type == "following":
        if viewer_id is None:
            return []
        followed = followed_pet_ids(db, user_id=viewer_id)
        if not followed:
            return []
        statement = statement.where(Post.pet_id.in_(followed))

    records: list[dict[str, Any]] = []
    for row in db.execute(statement).all():
        liked = row[3] if viewer_id is not None else 0
        records.append(_serialize_post(row[0], likes_count=row[1], comments_count=row[2], liked=bool(liked)))
    return records


def delete_post(db: Session, *, post_id: UUID, requester: User) -> None:
    """Delete a post when requester is the author or an admin."""

    post = _get_post_or_404(db, post_id)
    if post.user_id != requester.id and not is_admin(requester):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to delete this post")
    db.delete(post)
    db.commit()
    hub.publish(TableChangeEvent(table="posts", event="DELETE", row_id=post_id))


def engagement_snapshot(db: Session, post_id: UUID, viewer_id: UUID | None) -> dict[str, Any]:
    likes_count = db.scalar(select(func.count(Like.id)).where(Like.post_id == post_id)) or 0
    comments_count = db.scalar(select(func.count(Comment.id)).where(Comment.post_id == post_id)) or 0
    liked = False
    if viewer_id is not None:
        liked = (
            db.scalar(select(Like.id).where(Like.post_id == post_id, Like.user_id == viewer_id).limit(1))
            is not None
        )
    return {
        "post_id": post_id,
        "likes_count": int(likes_count),
        "comments_count": int(comments_count),
        "liked_by_user": liked,
    }


def _publish_engagement(snapshot: dict[str, Any]) -> None:
    hub.publish(
        PostEngagementEvent(
            post_id=snapshot["post_id"],
            likes_count=snapshot["likes_count"],
            comments_count=snapshot["comments_count"],
        )
    )


def set_like_state(
    db: Session,
    *,
    post_id: UUID,
    user: User,
    should_like: bool,
    pet_id: UUID | None = None,
) -> dict[str, Any]:
    """Create or delete the viewer's like edge and return the fresh counters."""

    post = _get_post_or_404(db, post_id)
    if should_like and pet_id is not None:
        require_own_pet(db, user_id=user.id, pet_id=pet_id)

    existing = db.scalar(select(Like).where(Like.post_id == post_id, Like.user_id == user.id))
    created = False
    if should_like and existing is None:
        db.add(Like(post_id=post_id, user_id=user.id, pet_id=pet_id))
        created = True
    elif not should_like and existing is not None:
        db.delete(existing)
    else:
        return engagement_snapshot(db, post_id, user.id)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        created = False
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update like") from exc

    snapshot = engagement_snapshot(db, post_id, user.id)
    _publish_engagement(snapshot)
    if created:
        notify_post_owner(
            db,
            actor=user,
            post=post,
            type_=NotificationType.LIKE,
            title_suffix="liked your post",
            actor_pet_id=pet_id,
        )
    return snapshot


def list_comments(db: Session, *, post_id: UUID) -> list[Comment]:
    _get_post_or_404(db, post_id)
    stmt = (
        select(Comment)
        .options(selectinload(Comment.pet))
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc())
    )
    return list(db.scalars(stmt))


def create_comment(
    db: Session,
    *,
    post_id: UUID,
    author: User,
    content: str,
    pet_id: UUID | None = None,
) -> Comment:
    post = _get_post_or_404(db, post_id)
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Comment cannot be empty")
    if pet_id is not None:
        require_own_pet(db, user_id=author.id, pet_id=pet_id)

    comment = Comment(post_id=post.id, user_id=author.id, pet_id=pet_id, content=text)
    db.add(comment)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add comment") from exc
    db.refresh(comment)

    _publish_engagement(engagement_snapshot(db, post.id, None))
    notify_post_owner(
        db,
        actor=author,
        post=post,
        type_=NotificationType.COMMENT,
        title_suffix="commented on your post",
        actor_pet_id=pet_id,
    )
    return comment


def delete_comment(db: Session, *, post_id: UUID, comment_id: UUID, requester: User) -> None:
    comment = db.get(Comment, comment_id)
    if comment is None or comment.post_id != post_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    if comment.user_id != requester.id and not is_admin(requester):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to delete this comment")
    db.delete(comment)
    db.commit()
    _publish_engagement(engagement_snapshot(db, post_id, None))


__all__ = [
    "FeedType",
    "create_post",
    "list_feed",
    "delete_post",
    "engagement_snapshot",
    "set_like_state",
    "list_comments",
    "create_comment",
    "delete_comment",
]
