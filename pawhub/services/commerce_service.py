"""Business logic for the product catalog and checkout."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import ORDER_STATUSES
from ..models import Order, Product, User
from ..schemas import OrderCreate, ProductCreate, TableChangeEvent
from .notification_service import NotificationType, add_notification
from .realtime import hub

logger = logging.getLogger(__name__)


def list_products(db: Session, *, category: str | None = None) -> list[Product]:
    stmt = select(Product).order_by(Product.created_at.desc())
    if category and category.strip():
        stmt = stmt.where(Product.category == category.strip())
    return list(db.scalars(stmt))


def create_product(db: Session, *, payload: ProductCreate) -> Product:
    product = Product(**payload.model_dump())
    db.add(product)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to create product") from exc
    db.refresh(product)
    return product


def create_order(db: Session, *, customer: User, payload: OrderCreate) -> Order:
    """Snapshot the requested products into an order and reserve stock."""

    quantities: dict[UUID, int] = {}
    for line in payload.items:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity

    products = {
        product.id: product
        for product in db.scalars(select(Product).where(Product.id.in_(list(quantities))))
    }
    missing = [str(product_id) for product_id in quantities if product_id not in products]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown products: {', '.join(missing)}",
        )

    items: list[dict[str, object]] = []
    total = 0.0
    for product_id, quantity in quantities.items():
        product = products[product_id]
        if product.stock is not None:
            if product.stock < quantity:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Not enough stock for {product.name}",
                )
            product.stock -= quantity
        items.append({"id": str(product.id), "name": product.name, "price": product.price, "quantity": quantity})
        total += product.price * quantity

    order = Order(
        user_id=customer.id,
        items=items,
        total_amount=round(total, 2),
        status="pending",
        shipping_address=(payload.shipping_address or "").strip() or None,
    )
    db.add(order)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Checkout failed for user %s", customer.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to place order") from exc
    db.refresh(order)

    hub.publish(TableChangeEvent(table="orders", event="INSERT", row_id=order.id))
    return order


def list_orders_for_user(db: Session, *, user_id: UUID) -> list[Order]:
    stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
    return list(db.scalars(stmt))


def update_order_status(db: Session, *, order_id: UUID, new_status: str) -> Order:
    normalized = (new_status or "").strip().lower()
    if normalized not in ORDER_STATUSES:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Unknown order status")

    order = db.get(Order, order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    if order.status == normalized:
        return order

    order.status = normalized
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update order") from exc
    db.refresh(order)

    hub.publish(TableChangeEvent(table="orders", event="UPDATE", row_id=order.id))
    add_notification(
        db,
        user_id=order.user_id,
        type_=NotificationType.ORDER,
        title=f"Your order is now {normalized}",
        target_order_id=order.id,
    )
    return order


__all__ = [
    "list_products",
    "create_product",
    "create_order",
    "list_orders_for_user",
    "update_order_status",
]
