"""Convenience exports for ORM models."""
from .clinic import Appointment, Clinic
from .commerce import Order, Product
from .follow import Follow
from .notification import Notification
from .pet import Pet
from .post import Comment, Like, Post
from .story import Story, StoryView
from .user import User

__all__ = [
    "Appointment",
    "Clinic",
    "Comment",
    "Follow",
    "Like",
    "Notification",
    "Order",
    "Pet",
    "Post",
    "Product",
    "Story",
    "StoryView",
    "User",
]
