"""Business logic for pet profiles and the explore listing."""
from __future__ import annotations

from collections import Counter
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Follow, Pet, User
from ..schemas import PetCreate, PetResponse, PetUpdate
from .auth_service import is_admin


def get_pet_or_404(db: Session, pet_id: UUID) -> Pet:
    pet = db.get(Pet, pet_id)
    if pet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pet not found")
    return pet


def require_own_pet(db: Session, *, user_id: UUID, pet_id: UUID) -> Pet:
    """Return ``pet_id`` if ``user_id`` owns it; users may only act as their own pets."""

    pet = get_pet_or_404(db, pet_id)
    if pet.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only act as your own pets")
    return pet


def create_pet(db: Session, *, owner: User, payload: PetCreate) -> Pet:
    pet = Pet(user_id=owner.id, **payload.model_dump())
    db.add(pet)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to create pet") from exc
    db.refresh(pet)
    return pet


def update_pet(db: Session, *, requester: User, pet_id: UUID, payload: PetUpdate) -> Pet:
    pet = get_pet_or_404(db, pet_id)
    if pet.user_id != requester.id and not is_admin(requester):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to edit this pet")

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No changes detected")
    for field, value in changes.items():
        setattr(pet, field, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update pet") from exc
    db.refresh(pet)
    return pet


def list_user_pets(db: Session, *, user_id: UUID) -> list[Pet]:
    stmt = select(Pet).where(Pet.user_id == user_id).order_by(Pet.created_at.asc())
    return list(db.scalars(stmt))


def explore_pets(
    db: Session,
    *,
    viewer_id: UUID | None,
    query: str | None = None,
    species: str | None = None,
    location: str | None = None,
) -> list[dict[str, Any]]:
    """Search pets and attach follower counts and the viewer's follow state.

    Follow data for the whole page is resolved with two queries instead of
    one lookup per pet.
    """

    stmt = select(Pet).order_by(Pet.created_at.desc()).limit(get_settings().explore_limit)
    text = (query or "").strip()
    if text:
        pattern = f"%{text}%"
        stmt = stmt.where(or_(Pet.name.ilike(pattern), Pet.breed.ilike(pattern)))
    if species and species.strip() and species.strip().lower() != "all":
        stmt = stmt.where(Pet.species == species.strip())
    if location and location.strip():
        stmt = stmt.where(Pet.location.ilike(f"%{location.strip()}%"))

    pets = list(db.scalars(stmt))
    if not pets:
        return []

    pet_ids = [pet.id for pet in pets]
    follower_counts = Counter(
        db.scalars(select(Follow.following_pet_id).where(Follow.following_pet_id.in_(pet_ids)))
    )
    followed: set[UUID] = set()
    if viewer_id is not None:
        followed = set(
            db.scalars(
                select(Follow.following_pet_id).where(
                    Follow.follower_user_id == viewer_id,
                    Follow.following_pet_id.in_(pet_ids),
                )
            )
        )

    records: list[dict[str, Any]] = []
    for pet in pets:
        record = PetResponse.model_validate(pet).model_dump()
        record["followers_count"] = follower_counts.get(pet.id, 0)
        record["is_following"] = pet.id in followed
        records.append(record)
    return records


__all__ = [
    "get_pet_or_404",
    "require_own_pet",
    "create_pet",
    "update_pet",
    "list_user_pets",
    "explore_pets",
]
