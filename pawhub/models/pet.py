"""SQLAlchemy ORM model for pet profiles."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from pawhub.database import Base
from .base import TimestampMixin


class Pet(TimestampMixin, Base):
    __tablename__ = "pets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    species = Column(String(60), nullable=False, index=True)
    breed = Column(String(120), nullable=True)
    age = Column(String(60), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    cover_photo_url = Column(String(1024), nullable=True)

    owner = relationship("User", back_populates="pets")
    posts = relationship("Post", back_populates="pet", cascade="all, delete-orphan")
    followers = relationship(
        "Follow",
        foreign_keys="Follow.following_pet_id",
        back_populates="following_pet",
        cascade="all, delete-orphan",
    )


__all__ = ["Pet"]
