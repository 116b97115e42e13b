"""Admin analytics dashboard controller."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from ..schemas import AnalyticsReport, TableChangeEvent
from .aggregation import build_report
from .events import parse_event
from .remote import RemoteClient, RemoteError
from .session import ClientSession

logger = logging.getLogger(__name__)

WATCHED_TABLES = frozenset({"orders", "appointments"})


class AdminDashboard:
    """Fetches raw rows and derives the analytics report client-side.

    Order and appointment change events invalidate the report and trigger a
    re-fetch; nothing is patched incrementally.
    """

    def __init__(
        self,
        remote: RemoteClient,
        session: ClientSession,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.remote = remote
        self.session = session
        self.report: AnalyticsReport | None = None
        self.error: RemoteError | None = None
        self.loading = False
        self._clock = clock

    async def load(self) -> AnalyticsReport | None:
        if not self.session.is_admin:
            return None
        self.loading = True
        try:
            dataset = await self.remote.analytics_dataset()
        except RemoteError as exc:
            logger.warning("Could not load analytics dataset: %s", exc)
            self.error = exc
            return self.report
        finally:
            self.loading = False
        self.error = None
        self.report = build_report(dataset, self._clock() if self._clock else None)
        return self.report

    async def handle_event(self, payload: Any) -> bool:
        event = parse_event(payload)
        if not isinstance(event, TableChangeEvent) or event.table not in WATCHED_TABLES:
            return False
        await self.load()
        return True


__all__ = ["AdminDashboard", "WATCHED_TABLES"]
