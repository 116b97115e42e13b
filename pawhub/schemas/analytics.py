"""Row and report shapes for the admin analytics dashboard.

Rows arrive loosely populated from the table API (nullable amounts, missing
item arrays, naive timestamps). The validators below settle every optional
field once, at the boundary, so the aggregation code never has to guard.
"""
from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import UtcDateTime


class _Row(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class OrderItemRow(_Row):
    id: str | None = None
    name: str | None = None
    price: float = 0.0
    quantity: int = 1

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str | None:
        return str(value) if value is not None else None

    @field_validator("price", mode="before")
    @classmethod
    def _default_price(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        return 1 if value in (None, 0) else value


class OrderRow(_Row):
    id: UUID
    total_amount: float = 0.0
    status: str = "pending"
    created_at: UtcDateTime
    items: list[OrderItemRow] = Field(default_factory=list)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _default_total(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return value or "pending"

    @field_validator("items", mode="before")
    @classmethod
    def _default_items(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


class ProductRow(_Row):
    id: UUID
    name: str
    category: str | None = None
    price: float = 0.0
    image_url: str | None = None


class ClinicRow(_Row):
    id: UUID
    is_verified: bool = False
    is_blocked: bool = False
    verification_status: str | None = None

    @field_validator("is_verified", "is_blocked", mode="before")
    @classmethod
    def _default_flag(cls, value: Any) -> Any:
        return bool(value)


class AppointmentRow(_Row):
    id: UUID
    status: str | None = None


class CreatedRow(_Row):
    """Any row where only identity and creation time matter."""

    id: UUID
    created_at: UtcDateTime


class AnalyticsDataset(BaseModel):
    orders: list[OrderRow] = Field(default_factory=list)
    products: list[ProductRow] = Field(default_factory=list)
    clinics: list[ClinicRow] = Field(default_factory=list)
    appointments: list[AppointmentRow] = Field(default_factory=list)
    profiles: list[CreatedRow] = Field(default_factory=list)
    posts: list[CreatedRow] = Field(default_factory=list)
    total_pets: int = 0


class DailyTrend(BaseModel):
    date: str
    orders: int
    revenue: float


class StatusSlice(BaseModel):
    name: str
    value: int
    color: str


class CategorySales(BaseModel):
    name: str
    sales: int
    revenue: float


class TopProduct(BaseModel):
    id: str
    name: str
    category: str
    total_sold: int
    revenue: float
    image_url: str | None = None


class ClinicStats(BaseModel):
    total: int = 0
    verified: int = 0
    pending: int = 0
    blocked: int = 0


class AppointmentStats(BaseModel):
    total: int = 0
    completed: int = 0
    confirmed: int = 0
    pending: int = 0
    cancelled: int = 0


class AnalyticsReport(BaseModel):
    total_revenue: float
    previous_month_revenue: float
    revenue_growth: float
    total_orders: int
    previous_month_orders: int
    order_growth: float
    average_order_value: float
    daily_trends: list[DailyTrend]
    order_status_distribution: list[StatusSlice]
    category_sales: list[CategorySales]
    top_products: list[TopProduct]
    total_users: int
    new_users_this_month: int
    user_growth: float
    clinic_stats: ClinicStats
    appointment_stats: AppointmentStats
    total_posts: int
    posts_this_month: int
    total_pets: int


__all__ = [
    "OrderItemRow",
    "OrderRow",
    "ProductRow",
    "ClinicRow",
    "AppointmentRow",
    "CreatedRow",
    "AnalyticsDataset",
    "DailyTrend",
    "StatusSlice",
    "CategorySales",
    "TopProduct",
    "ClinicStats",
    "AppointmentStats",
    "AnalyticsReport",
]
