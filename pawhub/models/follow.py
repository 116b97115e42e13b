"""SQLAlchemy ORM model for follow edges between a user and a pet."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from pawhub.database import Base
from .base import CreatedAtMixin


class Follow(CreatedAtMixin, Base):
    __tablename__ = "follows"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    follower_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    follower_pet_id = Column(UUID(as_uuid=True), ForeignKey("pets.id", ondelete="SET NULL"), nullable=True)
    following_pet_id = Column(UUID(as_uuid=True), ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True)

    follower = relationship("User", foreign_keys=[follower_user_id], back_populates="follows")
    follower_pet = relationship("Pet", foreign_keys=[follower_pet_id])
    following_pet = relationship("Pet", foreign_keys=[following_pet_id], back_populates="followers")

    __table_args__ = (UniqueConstraint("follower_user_id", "following_pet_id", name="uq_follows_user_pet"),)


__all__ = ["Follow"]
