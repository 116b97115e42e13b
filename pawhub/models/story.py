"""SQLAlchemy ORM models for ephemeral pet stories."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from pawhub.database import Base
from .base import CreatedAtMixin


class Story(CreatedAtMixin, Base):
    __tablename__ = "stories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    pet_id = Column(UUID(as_uuid=True), ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    media_url = Column(String(2048), nullable=False)
    media_type = Column(String(16), nullable=False, server_default="image", default="image")
    caption = Column(String(280), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    pet = relationship("Pet")
    views = relationship("StoryView", back_populates="story", cascade="all, delete-orphan")


class StoryView(CreatedAtMixin, Base):
    __tablename__ = "story_views"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    story_id = Column(UUID(as_uuid=True), ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, index=True)
    viewer_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    story = relationship("Story", back_populates="views")

    __table_args__ = (UniqueConstraint("story_id", "viewer_user_id", name="uq_story_views_story_viewer"),)


__all__ = ["Story", "StoryView"]
