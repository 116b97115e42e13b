"""Pet profile and explore API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import ExplorePetListResponse, PetCreate, PetListResponse, PetResponse, PetUpdate
from ..services import (
    create_pet,
    explore_pets,
    get_current_user,
    get_optional_user,
    get_pet_or_404,
    hub,
    list_user_pets,
    update_pet,
)

router = APIRouter(prefix="/pets", tags=["pets"])


@router.post("", response_model=PetResponse, status_code=status.HTTP_201_CREATED)
async def create_pet_endpoint(
    payload: PetCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PetResponse:
    return PetResponse.model_validate(create_pet(db, owner=current_user, payload=payload))


@router.get("/mine", response_model=PetListResponse)
async def my_pets_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PetListResponse:
    pets = list_user_pets(db, user_id=current_user.id)
    return PetListResponse(items=[PetResponse.model_validate(pet) for pet in pets])


@router.get("/explore", response_model=ExplorePetListResponse)
async def explore_pets_endpoint(
    q: str | None = Query(default=None, max_length=100),
    species: str | None = Query(default=None, max_length=60),
    location: str | None = Query(default=None, max_length=255),
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ExplorePetListResponse:
    seq = hub.last_seq
    records = explore_pets(
        db,
        viewer_id=viewer.id if viewer else None,
        query=q,
        species=species,
        location=location,
    )
    return ExplorePetListResponse.model_validate({"items": records, "seq": seq})


@router.get("/{pet_id}", response_model=PetResponse)
async def get_pet_endpoint(pet_id: UUID, db: Session = Depends(get_session)) -> PetResponse:
    return PetResponse.model_validate(get_pet_or_404(db, pet_id))


@router.patch("/{pet_id}", response_model=PetResponse)
async def update_pet_endpoint(
    pet_id: UUID,
    payload: PetUpdate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PetResponse:
    return PetResponse.model_validate(update_pet(db, requester=current_user, pet_id=pet_id, payload=payload))
