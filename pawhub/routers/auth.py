"""Authentication related API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import AuthResponse, LoginRequest, ProfileResponse, RegisterRequest, RoleSelectRequest
from ..services import authenticate_user, create_access_token, get_current_user, register_user, select_role

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    payload: RegisterRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user, token = register_user(db, payload)
    return AuthResponse(access_token=token, user_id=user.id, role=user.role)


@router.post("/login", response_model=AuthResponse)
async def login_endpoint(
    payload: LoginRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user = authenticate_user(db, payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return AuthResponse(access_token=create_access_token(user.id), user_id=user.id, role=user.role)


@router.get("/me", response_model=ProfileResponse)
async def me_endpoint(current_user: User = Depends(get_current_user)) -> ProfileResponse:
    return ProfileResponse.model_validate(current_user)


@router.post("/role", response_model=ProfileResponse)
async def select_role_endpoint(
    payload: RoleSelectRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    user = select_role(db, user=current_user, role=payload.role)
    return ProfileResponse.model_validate(user)
