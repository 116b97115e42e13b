"""Schemas for clinic discovery, verification and booking."""
from __future__ import annotations

from datetime import date, time
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import UtcDateTime


class ClinicCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    address: str | None = Field(default=None, max_length=500)
    phone: str | None = Field(default=None, max_length=64)


class ClinicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_user_id: UUID | None = None
    name: str
    address: str | None = None
    phone: str | None = None
    is_verified: bool
    is_blocked: bool
    verification_status: str
    rejection_reason: str | None = None
    created_at: UtcDateTime


class ClinicListResponse(BaseModel):
    items: list[ClinicResponse]


class ClinicVerificationUpdate(BaseModel):
    action: Literal["approve", "reject", "block", "unblock"]
    reason: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def require_reason_for_rejection(self) -> "ClinicVerificationUpdate":
        self.reason = (self.reason or "").strip() or None
        if self.action == "reject" and not self.reason:
            raise ValueError("A reason is required when rejecting a clinic")
        return self


class AppointmentCreate(BaseModel):
    appointment_date: date
    appointment_time: time
    pet_name: str | None = Field(default=None, max_length=120)
    reason: str | None = Field(default=None, max_length=1000)


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    clinic_id: UUID
    user_id: UUID
    pet_name: str | None = None
    reason: str | None = None
    appointment_date: date
    appointment_time: time
    status: str
    created_at: UtcDateTime


class AppointmentListResponse(BaseModel):
    items: list[AppointmentResponse]


class AppointmentStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "completed", "cancelled"]


__all__ = [
    "ClinicCreate",
    "ClinicResponse",
    "ClinicListResponse",
    "ClinicVerificationUpdate",
    "AppointmentCreate",
    "AppointmentResponse",
    "AppointmentListResponse",
    "AppointmentStatusUpdate",
]
