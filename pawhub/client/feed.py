"""Post feed controller with optimistic likes."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from ..schemas import PostEngagementEvent, PostResponse, TableChangeEvent
from .events import parse_event
from .remote import RemoteClient, RemoteError
from .session import ClientSession
from .toggle import ErrorCallback, OptimisticToggle, ToggleResult

logger = logging.getLogger(__name__)


class FeedController:
    """Loads a feed and keeps each post's like flag and counter in step."""

    def __init__(
        self,
        remote: RemoteClient,
        session: ClientSession,
        *,
        feed: str = "all",
        pet_id: UUID | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.remote = remote
        self.session = session
        self.feed = feed
        self.pet_id = pet_id
        self.loading = True
        self._on_error = on_error
        self._posts: list[PostResponse] = []
        self._likes: dict[UUID, OptimisticToggle] = {}
        self._comment_counts: dict[UUID, int] = {}
        self._comment_seq: dict[UUID, int] = {}

    @property
    def posts(self) -> list[PostResponse]:
        """Posts with like state and counters overlaid from the local toggles."""

        merged: list[PostResponse] = []
        for post in self._posts:
            toggle = self._likes[post.id]
            merged.append(
                post.model_copy(
                    update={
                        "liked_by_user": bool(toggle.active),
                        "likes_count": toggle.count,
                        "comments_count": self._comment_counts.get(post.id, post.comments_count),
                    }
                )
            )
        return merged

    def like_toggle(self, post_id: UUID) -> OptimisticToggle | None:
        return self._likes.get(post_id)

    async def load(self) -> list[PostResponse]:
        try:
            page = await self.remote.feed_page(feed=self.feed, pet_id=self.pet_id)
        except RemoteError as exc:
            logger.warning("Could not load %s feed: %s", self.feed, exc)
            return self.posts
        finally:
            self.loading = False

        posts = page.items
        likes: dict[UUID, OptimisticToggle] = {}
        for post in posts:
            toggle = self._likes.get(post.id) or OptimisticToggle(on_error=self._on_error, name=f"like:{post.id}")
            if not toggle.pending:
                toggle.load(post.liked_by_user, post.likes_count, seq=page.seq)
            likes[post.id] = toggle
        self._posts = posts
        self._likes = likes
        counts: dict[UUID, int] = {}
        for post in posts:
            if page.seq >= self._comment_seq.get(post.id, 0):
                self._comment_seq[post.id] = page.seq
                counts[post.id] = post.comments_count
            else:
                counts[post.id] = self._comment_counts.get(post.id, post.comments_count)
        self._comment_counts = counts
        return self.posts

    async def like(self, post_id: UUID, liker_pet_id: UUID | None = None) -> ToggleResult | None:
        toggle = self._likes.get(post_id)
        if toggle is None or not self.session.is_authenticated or toggle.active:
            return None
        return await self._flip(toggle, post_id, liker_pet_id)

    async def unlike(self, post_id: UUID) -> ToggleResult | None:
        toggle = self._likes.get(post_id)
        if toggle is None or not self.session.is_authenticated or not toggle.active:
            return None
        return await self._flip(toggle, post_id, None)

    async def _flip(self, toggle: OptimisticToggle, post_id: UUID, liker_pet_id: UUID | None) -> ToggleResult:
        acting_pet = liker_pet_id or self.session.active_pet_id

        async def write(should_like: bool) -> None:
            if should_like:
                await self.remote.like(post_id, pet_id=acting_pet)
            else:
                await self.remote.unlike(post_id)

        return await toggle.toggle(write)

    async def handle_event(self, payload: Any) -> bool:
        """Apply counter snapshots; new or removed posts trigger a reload."""

        event = parse_event(payload)
        if isinstance(event, PostEngagementEvent):
            toggle = self._likes.get(event.post_id)
            if toggle is None:
                return False
            if event.seq > self._comment_seq.get(event.post_id, 0):
                self._comment_seq[event.post_id] = event.seq
                self._comment_counts[event.post_id] = event.comments_count
            return toggle.apply_remote(count=event.likes_count, seq=event.seq)
        if isinstance(event, TableChangeEvent) and event.table == "posts":
            await self.load()
            return True
        return False


__all__ = ["FeedController"]
