"""SQLAlchemy ORM model for application users (profiles)."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from pawhub.database import Base
from .base import CreatedAtMixin


class User(CreatedAtMixin, Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True)
    display_name = Column(String(150), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    avatar_url = Column(String(1024), nullable=True)
    role = Column(String(32), nullable=False, server_default="user", default="user", index=True)

    pets = relationship("Pet", back_populates="owner", cascade="all, delete-orphan")
    follows = relationship(
        "Follow",
        foreign_keys="Follow.follower_user_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    notifications = relationship(
        "Notification",
        foreign_keys="Notification.user_id",
        back_populates="recipient",
        cascade="all, delete-orphan",
    )
    orders = relationship("Order", back_populates="customer", cascade="all, delete-orphan")
    clinics = relationship("Clinic", back_populates="owner")


__all__ = ["User"]
