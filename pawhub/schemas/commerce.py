"""Schemas for the product catalog and checkout."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import UtcDateTime


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=120)
    price: float = Field(..., ge=0)
    stock: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    description: str | None = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str
    price: float
    stock: int | None = None
    image_url: str | None = None
    description: str | None = None
    created_at: UtcDateTime


class ProductListResponse(BaseModel):
    items: list[ProductResponse]


class OrderLineRequest(BaseModel):
    product_id: UUID
    quantity: int = Field(default=1, ge=1, le=99)


class OrderCreate(BaseModel):
    items: list[OrderLineRequest] = Field(..., min_length=1)
    shipping_address: str | None = Field(default=None, max_length=500)


class OrderItem(BaseModel):
    id: UUID
    name: str
    price: float
    quantity: int


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    items: list[OrderItem]
    total_amount: float
    status: str
    shipping_address: str | None = None
    created_at: UtcDateTime


class OrderListResponse(BaseModel):
    items: list[OrderResponse]


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, max_length=32)


__all__ = [
    "ProductCreate",
    "ProductResponse",
    "ProductListResponse",
    "OrderLineRequest",
    "OrderCreate",
    "OrderItem",
    "OrderResponse",
    "OrderListResponse",
    "OrderStatusUpdate",
]
