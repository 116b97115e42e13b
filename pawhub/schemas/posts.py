"""Pydantic schemas for posts, likes and comments."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UtcDateTime
from .pets import PetResponse


class PostCreate(BaseModel):
    """Payload used by API clients when publishing a post as one of their pets."""

    pet_id: UUID
    content: str | None = Field(default=None, max_length=2200)
    media_urls: list[str] = Field(default_factory=list, max_length=10)
    media_type: Literal["image", "video"] = "image"


class PostResponse(BaseModel):
    """Serialized post with derived counters and the viewer's like state."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pet_id: UUID
    user_id: UUID
    content: str | None = None
    media_urls: list[str] = Field(default_factory=list)
    media_type: str = "image"
    likes_count: int = 0
    comments_count: int = 0
    liked_by_user: bool = False
    created_at: UtcDateTime
    pet: PetResponse | None = None


class PostFeedResponse(BaseModel):
    items: list[PostResponse]
    seq: int = 0


class LikeRequest(BaseModel):
    pet_id: UUID | None = None


class PostEngagementResponse(BaseModel):
    post_id: UUID
    likes_count: int
    comments_count: int
    liked_by_user: bool


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    pet_id: UUID | None = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    pet_id: UUID | None = None
    content: str
    created_at: UtcDateTime
    pet: PetResponse | None = None


class CommentListResponse(BaseModel):
    items: list[CommentResponse]


__all__ = [
    "PostCreate",
    "PostResponse",
    "PostFeedResponse",
    "LikeRequest",
    "PostEngagementResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentListResponse",
]
