"""Raw table reads feeding the client-side analytics dashboard."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import Appointment, Clinic, Order, Pet, Post, Product, User
from ..schemas import AnalyticsDataset


def load_analytics_dataset(db: Session) -> AnalyticsDataset:
    """Return the unaggregated rows the admin dashboard computes its report from."""

    orders = db.execute(select(Order.id, Order.total_amount, Order.status, Order.created_at, Order.items)).all()
    products = db.execute(select(Product.id, Product.name, Product.category, Product.price, Product.image_url)).all()
    clinics = db.execute(
        select(Clinic.id, Clinic.is_verified, Clinic.is_blocked, Clinic.verification_status)
    ).all()
    appointments = db.execute(select(Appointment.id, Appointment.status)).all()
    profiles = db.execute(select(User.id, User.created_at)).all()
    posts = db.execute(select(Post.id, Post.created_at)).all()
    total_pets = db.scalar(select(func.count()).select_from(Pet)) or 0

    return AnalyticsDataset.model_validate(
        {
            "orders": [row._asdict() for row in orders],
            "products": [row._asdict() for row in products],
            "clinics": [row._asdict() for row in clinics],
            "appointments": [row._asdict() for row in appointments],
            "profiles": [row._asdict() for row in profiles],
            "posts": [row._asdict() for row in posts],
            "total_pets": int(total_pets),
        }
    )


__all__ = ["load_analytics_dataset"]
