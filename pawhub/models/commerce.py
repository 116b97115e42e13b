"""SQLAlchemy ORM models for the product catalog and orders."""
from __future__ import annotations

import uuid

from sqlalchemy import JSON, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from pawhub.database import Base
from .base import CreatedAtMixin


class Product(CreatedAtMixin, Base):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    category = Column(String(120), nullable=False, index=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=True)
    image_url = Column(String(1024), nullable=True)
    description = Column(Text, nullable=True)


class Order(CreatedAtMixin, Base):
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Line items are snapshotted as {id, name, price, quantity} at checkout.
    items = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    total_amount = Column(Float, nullable=False, default=0.0)
    status = Column(String(32), nullable=False, server_default="pending", default="pending", index=True)
    shipping_address = Column(Text, nullable=True)

    customer = relationship("User", back_populates="orders")


__all__ = ["Product", "Order"]
