"""Async HTTP client for the PawHub table API."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import httpx

from ..config import get_settings
from ..schemas import (
    AnalyticsDataset,
    AuthResponse,
    CommentResponse,
    ExplorePetListResponse,
    ExplorePetResponse,
    FollowActionResponse,
    FollowStatsResponse,
    NotificationResponse,
    PostEngagementResponse,
    PostFeedResponse,
    PostResponse,
    StoryGroupResponse,
)
from .session import ClientSession

logger = logging.getLogger(__name__)


class RemoteError(RuntimeError):
    """Raised for any non-2xx response or transport failure."""

    def __init__(self, status_code: int | None, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail

    def __str__(self) -> str:
        if self.status_code is None:
            return self.detail
        return f"{self.status_code}: {self.detail}"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return str(body)


class RemoteClient:
    """Thin wrapper over ``httpx.AsyncClient`` that speaks the PawHub routes.

    Every method returns parsed pydantic models and raises :class:`RemoteError`
    on failure. The session's bearer token is attached per request, so logging
    in through :meth:`login` updates the same session the controllers hold.
    """

    def __init__(
        self,
        session: ClientSession,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None or timeout is None:
            settings = get_settings()
            base_url = base_url or settings.api_base_url
            timeout = timeout if timeout is not None else settings.remote_timeout
        self.session = session
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    async def __aenter__(self) -> "RemoteClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        if params:
            params = {key: str(value) for key, value in params.items() if value is not None}
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params or None,
                headers=self.session.auth_headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise RemoteError(None, str(exc) or exc.__class__.__name__) from exc

        if response.is_error:
            raise RemoteError(response.status_code, _error_detail(response))
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    # Auth -----------------------------------------------------------------

    async def login(self, username: str, password: str) -> AuthResponse:
        data = await self.request("POST", "/auth/login", json={"username": username, "password": password})
        auth = AuthResponse.model_validate(data)
        self.session.user_id = auth.user_id
        self.session.access_token = auth.access_token
        self.session.role = auth.role or "user"
        return auth

    # Follows --------------------------------------------------------------

    async def follow_stats(self, pet_id: UUID) -> FollowStatsResponse:
        return FollowStatsResponse.model_validate(await self.request("GET", f"/follows/stats/{pet_id}"))

    async def follow(self, pet_id: UUID, *, follower_pet_id: UUID | None = None) -> FollowActionResponse:
        body = {"follower_pet_id": str(follower_pet_id)} if follower_pet_id else None
        return FollowActionResponse.model_validate(await self.request("POST", f"/follows/{pet_id}", json=body))

    async def unfollow(self, pet_id: UUID) -> FollowActionResponse:
        return FollowActionResponse.model_validate(await self.request("DELETE", f"/follows/{pet_id}"))

    async def explore_pets(
        self,
        *,
        query: str | None = None,
        species: str | None = None,
        location: str | None = None,
    ) -> list[ExplorePetResponse]:
        page = await self.explore_page(query=query, species=species, location=location)
        return page.items

    async def explore_page(
        self,
        *,
        query: str | None = None,
        species: str | None = None,
        location: str | None = None,
    ) -> ExplorePetListResponse:
        """Explore results plus the realtime ``seq`` they are current as of."""

        data = await self.request("GET", "/pets/explore", params={"q": query, "species": species, "location": location})
        return ExplorePetListResponse.model_validate(data)

    # Posts ----------------------------------------------------------------

    async def feed(self, *, feed: str = "all", pet_id: UUID | None = None) -> list[PostResponse]:
        return (await self.feed_page(feed=feed, pet_id=pet_id)).items

    async def feed_page(self, *, feed: str = "all", pet_id: UUID | None = None) -> PostFeedResponse:
        data = await self.request("GET", "/posts", params={"feed": feed, "pet_id": pet_id})
        return PostFeedResponse.model_validate(data)

    async def like(self, post_id: UUID, *, pet_id: UUID | None = None) -> PostEngagementResponse:
        body = {"pet_id": str(pet_id)} if pet_id else None
        return PostEngagementResponse.model_validate(await self.request("POST", f"/posts/{post_id}/like", json=body))

    async def unlike(self, post_id: UUID) -> PostEngagementResponse:
        return PostEngagementResponse.model_validate(await self.request("DELETE", f"/posts/{post_id}/like"))

    async def comments(self, post_id: UUID) -> list[CommentResponse]:
        data = await self.request("GET", f"/posts/{post_id}/comments")
        return [CommentResponse.model_validate(item) for item in data.get("items", [])]

    async def add_comment(self, post_id: UUID, content: str, *, pet_id: UUID | None = None) -> CommentResponse:
        body: dict[str, Any] = {"content": content}
        if pet_id:
            body["pet_id"] = str(pet_id)
        return CommentResponse.model_validate(await self.request("POST", f"/posts/{post_id}/comments", json=body))

    async def delete_comment(self, post_id: UUID, comment_id: UUID) -> None:
        await self.request("DELETE", f"/posts/{post_id}/comments/{comment_id}")

    # Stories --------------------------------------------------------------

    async def story_groups(self) -> list[StoryGroupResponse]:
        data = await self.request("GET", "/stories")
        return [StoryGroupResponse.model_validate(item) for item in data.get("groups", [])]

    async def mark_story_viewed(self, story_id: UUID) -> None:
        await self.request("POST", f"/stories/{story_id}/view")

    # Notifications --------------------------------------------------------

    async def notifications(self) -> list[NotificationResponse]:
        data = await self.request("GET", "/notifications")
        return [NotificationResponse.model_validate(item) for item in data.get("items", [])]

    async def unread_count(self) -> int:
        data = await self.request("GET", "/notifications/summary")
        return int(data.get("unread_count", 0))

    async def mark_all_read(self) -> None:
        await self.request("POST", "/notifications/mark-read")

    # Admin ----------------------------------------------------------------

    async def analytics_dataset(self) -> AnalyticsDataset:
        return AnalyticsDataset.model_validate(await self.request("GET", "/admin/dataset"))


__all__ = ["RemoteClient", "RemoteError"]
