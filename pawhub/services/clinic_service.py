"""Business logic for clinic verification and appointment booking."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Appointment, Clinic, User
from ..schemas import AppointmentCreate, ClinicCreate, ClinicVerificationUpdate, TableChangeEvent
from .auth_service import is_admin
from .notification_service import NotificationType, add_notification
from .realtime import hub


def _commit(db: Session, failure: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure) from exc


def get_clinic_or_404(db: Session, clinic_id: UUID) -> Clinic:
    clinic = db.get(Clinic, clinic_id)
    if clinic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Clinic not found")
    return clinic


def list_clinics(db: Session, *, include_unlisted: bool = False) -> list[Clinic]:
    """Verified, unblocked clinics; admins may ask for every clinic."""

    stmt = select(Clinic).order_by(Clinic.name.asc())
    if not include_unlisted:
        stmt = stmt.where(Clinic.is_verified.is_(True), Clinic.is_blocked.is_(False))
    return list(db.scalars(stmt))


def create_clinic(db: Session, *, owner: User, payload: ClinicCreate) -> Clinic:
    if (owner.role or "user") not in {"clinic_owner", "admin"}:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only clinic owners can register clinics")

    clinic = Clinic(
        owner_user_id=owner.id,
        name=payload.name.strip(),
        address=(payload.address or "").strip() or None,
        phone=(payload.phone or "").strip() or None,
        verification_status="pending",
    )
    db.add(clinic)
    _commit(db, "Unable to register clinic")
    db.refresh(clinic)
    hub.publish(TableChangeEvent(table="clinics", event="INSERT", row_id=clinic.id))
    return clinic


def update_clinic_verification(db: Session, *, clinic_id: UUID, update: ClinicVerificationUpdate) -> Clinic:
    clinic = get_clinic_or_404(db, clinic_id)

    if update.action == "approve":
        clinic.is_verified = True
        clinic.verification_status = "approved"
        clinic.rejection_reason = None
        title = f"{clinic.name} has been verified"
    elif update.action == "reject":
        clinic.is_verified = False
        clinic.verification_status = "rejected"
        clinic.rejection_reason = update.reason
        title = f"{clinic.name} verification was rejected"
    elif update.action == "block":
        clinic.is_blocked = True
        title = f"{clinic.name} has been blocked"
    else:
        clinic.is_blocked = False
        title = f"{clinic.name} has been unblocked"

    _commit(db, "Unable to update clinic")
    db.refresh(clinic)
    hub.publish(TableChangeEvent(table="clinics", event="UPDATE", row_id=clinic.id))

    if clinic.owner_user_id is not None:
        add_notification(
            db,
            user_id=clinic.owner_user_id,
            type_=NotificationType.VERIFICATION,
            title=title,
            message=update.reason,
            target_clinic_id=clinic.id,
        )
    return clinic


def book_appointment(db: Session, *, clinic_id: UUID, patient: User, payload: AppointmentCreate) -> Appointment:
    clinic = get_clinic_or_404(db, clinic_id)
    if not clinic.is_verified or clinic.is_blocked:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Clinic is not accepting appointments")

    slot = datetime.combine(payload.appointment_date, payload.appointment_time, tzinfo=timezone.utc)
    if slot < datetime.now(timezone.utc):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Appointment must be in the future")

    appointment = Appointment(
        clinic_id=clinic.id,
        user_id=patient.id,
        pet_name=(payload.pet_name or "").strip() or None,
        reason=(payload.reason or "").strip() or None,
        appointment_date=payload.appointment_date,
        appointment_time=payload.appointment_time,
        status="pending",
    )
    db.add(appointment)
    _commit(db, "Unable to book appointment")
    db.refresh(appointment)

    hub.publish(TableChangeEvent(table="appointments", event="INSERT", row_id=appointment.id))
    if clinic.owner_user_id is not None and clinic.owner_user_id != patient.id:
        add_notification(
            db,
            user_id=clinic.owner_user_id,
            type_=NotificationType.NEW_APPOINTMENT,
            title=f"New appointment request for {payload.appointment_date.isoformat()}",
            target_appointment_id=appointment.id,
            target_clinic_id=clinic.id,
        )
    return appointment


def list_appointments_for_user(db: Session, *, user_id: UUID) -> list[Appointment]:
    stmt = (
        select(Appointment)
        .where(Appointment.user_id == user_id)
        .order_by(Appointment.appointment_date.desc(), Appointment.appointment_time.desc())
    )
    return list(db.scalars(stmt))


def update_appointment_status(db: Session, *, appointment_id: UUID, requester: User, new_status: str) -> Appointment:
    """Clinic owners and admins move appointments through their lifecycle; patients may only cancel."""

    appointment = db.get(Appointment, appointment_id)
    if appointment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")

    clinic = get_clinic_or_404(db, appointment.clinic_id)
    manages_clinic = clinic.owner_user_id == requester.id or is_admin(requester)
    is_patient = appointment.user_id == requester.id
    if not manages_clinic and not (is_patient and new_status == "cancelled"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to update this appointment")

    if appointment.status == new_status:
        return appointment

    appointment.status = new_status
    _commit(db, "Unable to update appointment")
    db.refresh(appointment)

    hub.publish(TableChangeEvent(table="appointments", event="UPDATE", row_id=appointment.id))
    if not is_patient:
        add_notification(
            db,
            user_id=appointment.user_id,
            type_=NotificationType.APPOINTMENT,
            title=f"Your appointment at {clinic.name} is {new_status}",
            target_appointment_id=appointment.id,
            target_clinic_id=clinic.id,
        )
    return appointment


__all__ = [
    "get_clinic_or_404",
    "list_clinics",
    "create_clinic",
    "update_clinic_verification",
    "book_appointment",
    "list_appointments_for_user",
    "update_appointment_status",
]
