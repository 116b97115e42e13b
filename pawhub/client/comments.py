"""Comment thread controller for a single post."""
from __future__ import annotations

import logging
from uuid import UUID

from ..schemas import CommentResponse
from .remote import RemoteClient, RemoteError
from .session import ClientSession
from .toggle import ErrorCallback

logger = logging.getLogger(__name__)


class CommentsController:
    def __init__(
        self,
        remote: RemoteClient,
        session: ClientSession,
        post_id: UUID,
        *,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.remote = remote
        self.session = session
        self.post_id = post_id
        self.comments: list[CommentResponse] = []
        self.loading = True
        self._on_error = on_error

    def _report(self, action: str, exc: RemoteError) -> None:
        logger.warning("Could not %s on post %s: %s", action, self.post_id, exc)
        if self._on_error is not None:
            self._on_error(exc)

    async def load(self) -> list[CommentResponse]:
        try:
            self.comments = await self.remote.comments(self.post_id)
        except RemoteError as exc:
            logger.warning("Could not load comments for %s: %s", self.post_id, exc)
        finally:
            self.loading = False
        return self.comments

    async def add(self, content: str, pet_id: UUID | None = None) -> CommentResponse | None:
        """Append the created comment; oldest-first order is preserved."""

        if not self.session.is_authenticated:
            return None
        try:
            comment = await self.remote.add_comment(self.post_id, content, pet_id=pet_id or self.session.active_pet_id)
        except RemoteError as exc:
            self._report("add comment", exc)
            return None
        self.comments = [*self.comments, comment]
        return comment

    async def delete(self, comment_id: UUID) -> bool:
        if not self.session.is_authenticated:
            return False
        try:
            await self.remote.delete_comment(self.post_id, comment_id)
        except RemoteError as exc:
            self._report("delete comment", exc)
            return False
        self.comments = [comment for comment in self.comments if comment.id != comment_id]
        return True


__all__ = ["CommentsController"]
