"""Aggregate router exports."""
from .admin import router as admin_router
from .auth import router as auth_router
from .clinics import router as clinics_router
from .commerce import router as commerce_router
from .follows import router as follows_router
from .notifications import router as notifications_router
from .pets import router as pets_router
from .posts import router as posts_router
from .realtime import router as realtime_router
from .stories import router as stories_router

__all__ = [
    "admin_router",
    "auth_router",
    "clinics_router",
    "commerce_router",
    "follows_router",
    "notifications_router",
    "pets_router",
    "posts_router",
    "realtime_router",
    "stories_router",
]
