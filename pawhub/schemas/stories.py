"""Schemas for ephemeral pet stories."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .common import UtcDateTime
from .pets import PetResponse


class StoryCreate(BaseModel):
    pet_id: UUID
    media_url: str = Field(..., min_length=1, max_length=2048)
    media_type: Literal["image", "video"] = "image"
    caption: str | None = Field(default=None, max_length=280)


class StoryResponse(BaseModel):
    id: UUID
    pet_id: UUID
    user_id: UUID
    media_url: str
    media_type: str
    caption: str | None = None
    created_at: UtcDateTime
    expires_at: UtcDateTime
    viewed: bool = False


class StoryGroupResponse(BaseModel):
    pet: PetResponse
    stories: list[StoryResponse]
    has_unviewed: bool


class StoryFeedResponse(BaseModel):
    groups: list[StoryGroupResponse]


__all__ = ["StoryCreate", "StoryResponse", "StoryGroupResponse", "StoryFeedResponse"]
