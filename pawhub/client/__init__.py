"""Client-side controllers that talk to the PawHub API."""
from .aggregation import build_report
from .comments import CommentsController
from .dashboard import AdminDashboard
from .feed import FeedController
from .follow import ExploreFollowMap, FollowController
from .notifications import NotificationsController
from .remote import RemoteClient, RemoteError
from .session import ClientSession
from .stories import StoriesController
from .toggle import OptimisticToggle, ToggleResult, ToggleSnapshot, TogglePhase, ToggleState, ToggleStateError

__all__ = [
    "AdminDashboard",
    "ClientSession",
    "CommentsController",
    "ExploreFollowMap",
    "FeedController",
    "FollowController",
    "NotificationsController",
    "OptimisticToggle",
    "RemoteClient",
    "RemoteError",
    "StoriesController",
    "ToggleResult",
    "ToggleSnapshot",
    "TogglePhase",
    "ToggleState",
    "ToggleStateError",
    "build_report",
]
