"""Product catalog and checkout API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
)
from ..services import (
    create_order,
    create_product,
    get_current_user,
    list_orders_for_user,
    list_products,
    require_admin,
    update_order_status,
)

router = APIRouter(tags=["commerce"])


@router.get("/products", response_model=ProductListResponse)
async def list_products_endpoint(
    category: str | None = Query(default=None, max_length=120),
    db: Session = Depends(get_session),
) -> ProductListResponse:
    return ProductListResponse(items=[ProductResponse.model_validate(p) for p in list_products(db, category=category)])


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product_endpoint(
    payload: ProductCreate,
    db: Session = Depends(get_session),
    _admin: User = Depends(require_admin()),
) -> ProductResponse:
    return ProductResponse.model_validate(create_product(db, payload=payload))


@router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order_endpoint(
    payload: OrderCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> OrderResponse:
    return OrderResponse.model_validate(create_order(db, customer=current_user, payload=payload))


@router.get("/orders/mine", response_model=OrderListResponse)
async def my_orders_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> OrderListResponse:
    orders = list_orders_for_user(db, user_id=current_user.id)
    return OrderListResponse(items=[OrderResponse.model_validate(order) for order in orders])


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status_endpoint(
    order_id: UUID,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_session),
    _admin: User = Depends(require_admin()),
) -> OrderResponse:
    return OrderResponse.model_validate(update_order_status(db, order_id=order_id, new_status=payload.status))
