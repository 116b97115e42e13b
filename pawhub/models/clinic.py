"""SQLAlchemy ORM models for clinics and appointments."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, Date, ForeignKey, String, Text, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from pawhub.database import Base
from .base import CreatedAtMixin


class Clinic(CreatedAtMixin, Base):
    __tablename__ = "clinics"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    phone = Column(String(64), nullable=True)
    is_verified = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    is_blocked = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    verification_status = Column(String(32), nullable=False, server_default="pending", default="pending")
    rejection_reason = Column(Text, nullable=True)

    owner = relationship("User", back_populates="clinics")
    appointments = relationship("Appointment", back_populates="clinic", cascade="all, delete-orphan")


class Appointment(CreatedAtMixin, Base):
    __tablename__ = "appointments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    clinic_id = Column(UUID(as_uuid=True), ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    pet_name = Column(String(120), nullable=True)
    reason = Column(Text, nullable=True)
    appointment_date = Column(Date, nullable=False)
    appointment_time = Column(Time, nullable=False)
    status = Column(String(32), nullable=False, server_default="pending", default="pending", index=True)

    clinic = relationship("Clinic", back_populates="appointments")


__all__ = ["Clinic", "Appointment"]
