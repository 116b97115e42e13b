"""Convenience exports for schema layer."""
from .analytics import AnalyticsDataset, AnalyticsReport
from .auth import AuthResponse, LoginRequest, ProfileResponse, RegisterRequest, RoleSelectRequest
from .clinics import (
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatusUpdate,
    ClinicCreate,
    ClinicListResponse,
    ClinicResponse,
    ClinicVerificationUpdate,
)
from .commerce import (
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
)
from .follow import FollowActionResponse, FollowRequest, FollowStatsResponse
from .notifications import NotificationListResponse, NotificationResponse, NotificationSummaryResponse
from .pets import ExplorePetListResponse, ExplorePetResponse, PetCreate, PetListResponse, PetResponse, PetUpdate
from .posts import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeRequest,
    PostCreate,
    PostEngagementResponse,
    PostFeedResponse,
    PostResponse,
)
from .realtime import PetFollowEvent, PostEngagementEvent, RealtimeEvent, TableChangeEvent, realtime_event_adapter
from .stories import StoryCreate, StoryFeedResponse, StoryGroupResponse, StoryResponse

__all__ = [
    "AnalyticsDataset",
    "AnalyticsReport",
    "AuthResponse",
    "LoginRequest",
    "ProfileResponse",
    "RegisterRequest",
    "RoleSelectRequest",
    "AppointmentCreate",
    "AppointmentListResponse",
    "AppointmentResponse",
    "AppointmentStatusUpdate",
    "ClinicCreate",
    "ClinicListResponse",
    "ClinicResponse",
    "ClinicVerificationUpdate",
    "OrderCreate",
    "OrderListResponse",
    "OrderResponse",
    "OrderStatusUpdate",
    "ProductCreate",
    "ProductListResponse",
    "ProductResponse",
    "FollowActionResponse",
    "FollowRequest",
    "FollowStatsResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "NotificationSummaryResponse",
    "ExplorePetListResponse",
    "ExplorePetResponse",
    "PetCreate",
    "PetListResponse",
    "PetResponse",
    "PetUpdate",
    "CommentCreate",
    "CommentListResponse",
    "CommentResponse",
    "LikeRequest",
    "PostCreate",
    "PostEngagementResponse",
    "PostFeedResponse",
    "PostResponse",
    "PetFollowEvent",
    "PostEngagementEvent",
    "RealtimeEvent",
    "TableChangeEvent",
    "realtime_event_adapter",
    "StoryCreate",
    "StoryFeedResponse",
    "StoryGroupResponse",
    "StoryResponse",
]
