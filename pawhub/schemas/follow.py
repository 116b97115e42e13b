"""Schemas supporting follower APIs."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class FollowRequest(BaseModel):
    follower_pet_id: UUID | None = None


class FollowStatsResponse(BaseModel):
    pet_id: UUID
    followers_count: int
    following_count: int
    is_following: bool
    seq: int = 0


class FollowActionResponse(FollowStatsResponse):
    status: Literal["followed", "unfollowed", "noop"]


__all__ = ["FollowRequest", "FollowStatsResponse", "FollowActionResponse"]
