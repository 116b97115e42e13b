"""Schemas for pet profiles."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UtcDateTime


class PetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    species: str = Field(..., min_length=1, max_length=60)
    breed: str | None = Field(default=None, max_length=120)
    age: str | None = Field(default=None, max_length=60)
    bio: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = None
    cover_photo_url: str | None = None


class PetUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    species: str | None = Field(default=None, min_length=1, max_length=60)
    breed: str | None = None
    age: str | None = None
    bio: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    cover_photo_url: str | None = None


class PetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    species: str
    breed: str | None = None
    age: str | None = None
    bio: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    cover_photo_url: str | None = None
    created_at: UtcDateTime


class PetListResponse(BaseModel):
    items: list[PetResponse]


class ExplorePetResponse(PetResponse):
    followers_count: int = 0
    is_following: bool = False


class ExplorePetListResponse(BaseModel):
    items: list[ExplorePetResponse]
    seq: int = 0


__all__ = [
    "PetCreate",
    "PetUpdate",
    "PetResponse",
    "PetListResponse",
    "ExplorePetResponse",
    "ExplorePetListResponse",
]
