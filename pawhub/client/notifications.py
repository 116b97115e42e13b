"""Notification inbox controller."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..schemas import NotificationResponse
from .remote import RemoteClient, RemoteError
from .session import ClientSession
from .toggle import ErrorCallback

logger = logging.getLogger(__name__)


class NotificationsController:
    def __init__(
        self,
        remote: RemoteClient,
        session: ClientSession,
        *,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.remote = remote
        self.session = session
        self.items: list[NotificationResponse] = []
        self.unread_count = 0
        self.loading = True
        self._on_error = on_error

    def _report(self, action: str, exc: RemoteError) -> None:
        logger.warning("Could not %s: %s", action, exc)
        if self._on_error is not None:
            self._on_error(exc)

    async def load(self) -> list[NotificationResponse]:
        if not self.session.is_authenticated:
            self.loading = False
            return self.items
        try:
            self.items = await self.remote.notifications()
            self.unread_count = await self.remote.unread_count()
        except RemoteError as exc:
            logger.warning("Could not load notifications: %s", exc)
        finally:
            self.loading = False
        return self.items

    async def mark_all_read(self) -> bool:
        if not self.session.is_authenticated:
            return False
        try:
            await self.remote.mark_all_read()
        except RemoteError as exc:
            self._report("mark notifications read", exc)
            return False
        self._mark_local_read()
        return True

    def _mark_local_read(self) -> None:
        self.items = [item.model_copy(update={"is_read": True}) for item in self.items]
        self.unread_count = 0

    def handle_push(self, payload: Any) -> NotificationResponse | None:
        """Apply a frame delivered over the per-user notification socket.

        Frames of an unknown type or shape are dropped.
        """

        if not isinstance(payload, dict):
            return None
        if payload.get("type") == "notification.read_all":
            self._mark_local_read()
            return None
        if payload.get("type") != "notification.created":
            return None
        try:
            item = NotificationResponse.model_validate(payload.get("notification"))
        except ValidationError:
            logger.debug("Ignoring malformed notification frame: %r", payload)
            return None
        self.items = [item, *self.items]
        if not item.is_read:
            self.unread_count += 1
        return item


__all__ = ["NotificationsController"]
