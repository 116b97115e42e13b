"""Realtime change events pushed over the feed socket."""
from __future__ import annotations

from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter


class PostEngagementEvent(BaseModel):
    type: Literal["post.engagement"] = "post.engagement"
    seq: int = 0
    post_id: UUID
    likes_count: int
    comments_count: int


class PetFollowEvent(BaseModel):
    type: Literal["pet.follow"] = "pet.follow"
    seq: int = 0
    pet_id: UUID
    followers_count: int


class TableChangeEvent(BaseModel):
    type: Literal["table.changed"] = "table.changed"
    seq: int = 0
    table: str
    event: Literal["INSERT", "UPDATE", "DELETE"]
    row_id: UUID | None = None


RealtimeEvent = Annotated[
    Union[PostEngagementEvent, PetFollowEvent, TableChangeEvent],
    Field(discriminator="type"),
]

realtime_event_adapter: TypeAdapter[RealtimeEvent] = TypeAdapter(RealtimeEvent)


__all__ = [
    "PostEngagementEvent",
    "PetFollowEvent",
    "TableChangeEvent",
    "RealtimeEvent",
    "realtime_event_adapter",
]
