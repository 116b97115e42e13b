"""Pydantic schemas for authentication endpoints."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .common import UtcDateTime


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=32)
    password: str = Field(..., min_length=6, max_length=72)
    email: EmailStr | None = None
    display_name: str | None = Field(default=None, max_length=150)


class LoginRequest(BaseModel):
    username: str
    password: str


class RoleSelectRequest(BaseModel):
    role: Literal["user", "doctor", "clinic_owner"]


class AuthResponse(BaseModel):
    access_token: str
    user_id: UUID
    token_type: str = "bearer"
    role: str | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    role: str
    created_at: UtcDateTime


__all__ = ["RegisterRequest", "LoginRequest", "RoleSelectRequest", "AuthResponse", "ProfileResponse"]
