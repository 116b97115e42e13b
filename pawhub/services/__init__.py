"""Convenience exports for service layer."""
from .admin_service import load_analytics_dataset
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    is_admin,
    register_user,
    require_admin,
    require_roles,
    select_role,
)
from .cleanup_service import CleanupError, CleanupSummary, run_cleanup
from .clinic_service import (
    book_appointment,
    create_clinic,
    list_appointments_for_user,
    list_clinics,
    update_appointment_status,
    update_clinic_verification,
)
from .commerce_service import create_order, create_product, list_orders_for_user, list_products, update_order_status
from .follow_service import FollowStats, follow_pet, get_follow_stats, unfollow_pet
from .notification_service import (
    NotificationType,
    add_notification,
    count_unread_notifications,
    list_notifications,
    mark_all_read,
    mark_read,
)
from .pet_service import create_pet, explore_pets, get_pet_or_404, list_user_pets, update_pet
from .post_service import (
    create_comment,
    create_post,
    delete_comment,
    delete_post,
    list_comments,
    list_feed,
    set_like_state,
)
from .realtime import hub
from .story_service import create_story, list_story_groups, mark_story_viewed

__all__ = [
    "load_analytics_dataset",
    "authenticate_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "is_admin",
    "register_user",
    "require_admin",
    "require_roles",
    "select_role",
    "CleanupError",
    "CleanupSummary",
    "run_cleanup",
    "book_appointment",
    "create_clinic",
    "list_appointments_for_user",
    "list_clinics",
    "update_appointment_status",
    "update_clinic_verification",
    "create_order",
    "create_product",
    "list_orders_for_user",
    "list_products",
    "update_order_status",
    "FollowStats",
    "follow_pet",
    "get_follow_stats",
    "unfollow_pet",
    "NotificationType",
    "add_notification",
    "count_unread_notifications",
    "list_notifications",
    "mark_all_read",
    "mark_read",
    "create_pet",
    "explore_pets",
    "get_pet_or_404",
    "list_user_pets",
    "update_pet",
    "create_comment",
    "create_post",
    "delete_comment",
    "delete_post",
    "list_comments",
    "list_feed",
    "set_like_state",
    "hub",
    "create_story",
    "list_story_groups",
    "mark_story_viewed",
]
