"""Utility mixins shared across ORM models."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreatedAtMixin:
    """Creation timestamp, stamped in Python so ordering survives SQLite's second resolution."""

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)


class TimestampMixin(CreatedAtMixin):
    """Creation and modification timestamps."""

    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


__all__ = ["CreatedAtMixin", "TimestampMixin", "utcnow"]
