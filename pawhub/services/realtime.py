"""In-memory WebSocket fan-out for feed events and per-user notification channels."""
from __future__ import annotations

import asyncio
import itertools
import json
import logging
from typing import Any, Iterable

from fastapi import WebSocket

from ..schemas.realtime import PetFollowEvent, PostEngagementEvent, TableChangeEvent

logger = logging.getLogger(__name__)

FEED_CHANNEL = "feed"

ChangeEvent = PostEngagementEvent | PetFollowEvent | TableChangeEvent


class RealtimeHub:
    """Tracks WebSocket connections per channel and broadcasts JSON payloads.

    The feed channel is shared by every client; notification channels are
    keyed by the recipient's user id. Change events are stamped with a
    process-wide increasing ``seq`` when they are scheduled, so subscribers
    can discard snapshots older than the one they already applied.
    """

    def __init__(self) -> None:
        self._channels: dict[str, set[WebSocket]] = {}
        self._connections: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()
        self._seq = itertools.count(1)
        self._last_seq = 0
        self._pending: set[asyncio.Task[None]] = set()

    async def connect(self, websocket: WebSocket, channel: str = FEED_CHANNEL) -> None:
        await websocket.accept()
        async with self._lock:
            self._channels.setdefault(channel, set()).add(websocket)
            self._connections[websocket] = channel

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            channel = self._connections.pop(websocket, None)
            if channel is None:
                return
            group = self._channels.get(channel)
            if group is None:
                return
            group.discard(websocket)
            if not group:
                self._channels.pop(channel, None)

    @property
    def last_seq(self) -> int:
        """Highest ``seq`` handed out so far; read responses carry it as their watermark."""

        return self._last_seq

    def next_seq(self) -> int:
        self._last_seq = next(self._seq)
        return self._last_seq

    async def broadcast(self, channels: str | Iterable[str], payload: dict[str, Any]) -> None:
        if isinstance(channels, str):
            names = [channels]
        else:
            names = [name for name in channels if name]
        if not names:
            return
        serialized = json.dumps(payload, default=str)
        async with self._lock:
            targets: list[WebSocket] = []
            for name in names:
                targets.extend(self._channels.get(name, ()))
        for ws in targets:
            try:
                await ws.send_text(serialized)
            except Exception:
                logger.warning("Dropping realtime socket after failed send")
                await self.disconnect(ws)

    def schedule(self, channels: str | Iterable[str], payload: dict[str, Any]) -> None:
        """Broadcast from synchronous service code running inside the event loop."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.broadcast(channels, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def publish(self, event: ChangeEvent) -> ChangeEvent:
        """Stamp ``event`` with the next sequence number and push it to the feed channel."""

        event.seq = self.next_seq()
        self.schedule(FEED_CHANNEL, event.model_dump(mode="json"))
        return event


hub = RealtimeHub()


__all__ = ["FEED_CHANNEL", "RealtimeHub", "hub"]
