"""Story tray controller."""
from __future__ import annotations

import logging
from uuid import UUID

from ..schemas import StoryGroupResponse
from .remote import RemoteClient, RemoteError
from .session import ClientSession
from .toggle import ErrorCallback

logger = logging.getLogger(__name__)


class StoriesController:
    def __init__(
        self,
        remote: RemoteClient,
        session: ClientSession,
        *,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.remote = remote
        self.session = session
        self.groups: list[StoryGroupResponse] = []
        self.loading = True
        self._on_error = on_error

    def _report(self, action: str, exc: RemoteError) -> None:
        logger.warning("Could not %s: %s", action, exc)
        if self._on_error is not None:
            self._on_error(exc)

    async def load(self) -> list[StoryGroupResponse]:
        try:
            self.groups = await self.remote.story_groups()
        except RemoteError as exc:
            logger.warning("Could not load stories: %s", exc)
        finally:
            self.loading = False
        return self.groups

    async def mark_viewed(self, story_id: UUID) -> bool:
        """Mark a story seen locally and remotely; local state is kept on failure."""

        if not self.session.is_authenticated:
            return False
        for group in self.groups:
            for story in group.stories:
                if story.id == story_id:
                    story.viewed = True
            group.has_unviewed = any(not story.viewed for story in group.stories)
        try:
            await self.remote.mark_story_viewed(story_id)
        except RemoteError as exc:
            self._report(f"record view of story {story_id}", exc)
            return False
        return True


__all__ = ["StoriesController"]
