"""Clinic discovery, verification and appointment booking routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatusUpdate,
    ClinicCreate,
    ClinicListResponse,
    ClinicResponse,
    ClinicVerificationUpdate,
)
from ..services import (
    book_appointment,
    create_clinic,
    get_current_user,
    get_optional_user,
    is_admin,
    list_appointments_for_user,
    list_clinics,
    require_admin,
    update_appointment_status,
    update_clinic_verification,
)

router = APIRouter(tags=["clinics"])


@router.get("/clinics", response_model=ClinicListResponse)
async def list_clinics_endpoint(
    include_unlisted: bool = Query(default=False),
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> ClinicListResponse:
    clinics = list_clinics(db, include_unlisted=include_unlisted and is_admin(viewer))
    return ClinicListResponse(items=[ClinicResponse.model_validate(clinic) for clinic in clinics])


@router.post("/clinics", response_model=ClinicResponse, status_code=status.HTTP_201_CREATED)
async def create_clinic_endpoint(
    payload: ClinicCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ClinicResponse:
    return ClinicResponse.model_validate(create_clinic(db, owner=current_user, payload=payload))


@router.patch("/clinics/{clinic_id}/verification", response_model=ClinicResponse)
async def clinic_verification_endpoint(
    clinic_id: UUID,
    payload: ClinicVerificationUpdate,
    db: Session = Depends(get_session),
    _admin: User = Depends(require_admin()),
) -> ClinicResponse:
    return ClinicResponse.model_validate(update_clinic_verification(db, clinic_id=clinic_id, update=payload))


@router.post(
    "/clinics/{clinic_id}/appointments",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def book_appointment_endpoint(
    clinic_id: UUID,
    payload: AppointmentCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentResponse:
    return AppointmentResponse.model_validate(
        book_appointment(db, clinic_id=clinic_id, patient=current_user, payload=payload)
    )


@router.get("/appointments/mine", response_model=AppointmentListResponse)
async def my_appointments_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentListResponse:
    records = list_appointments_for_user(db, user_id=current_user.id)
    return AppointmentListResponse(items=[AppointmentResponse.model_validate(item) for item in records])


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentResponse)
async def appointment_status_endpoint(
    appointment_id: UUID,
    payload: AppointmentStatusUpdate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentResponse:
    appointment = update_appointment_status(
        db,
        appointment_id=appointment_id,
        requester=current_user,
        new_status=payload.status,
    )
    return AppointmentResponse.model_validate(appointment)
