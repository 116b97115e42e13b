"""Optimistic boolean-plus-counter toggles for follow and like buttons.

A toggle flips its flag and moves its counter immediately, then awaits the
remote write. A failed write restores the exact pre-toggle snapshot unless a
newer toggle has started in the meantime, in which case the older failure is
reported as superseded and the newer toggle owns the state. When the last
in-flight write settles and the newest one failed, the toggle falls back to
the confirmed baseline: the last fetched or server-pushed state, advanced
only by writes that succeeded.

Server snapshots pushed over the realtime channel carry a ``seq``; stale
ones are dropped and fresh ones arriving while a write is in flight are
held until every pending write settles.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Awaitable, Callable

from .remote import RemoteError

logger = logging.getLogger(__name__)


class ToggleState(StrEnum):
    UNKNOWN = "unknown"
    ACTIVE = "active"
    INACTIVE = "inactive"


class TogglePhase(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"
    SUPERSEDED = "superseded"


class ToggleStateError(RuntimeError):
    """Raised when toggling a relationship whose state was never loaded."""


@dataclass(frozen=True, slots=True)
class ToggleSnapshot:
    active: bool | None
    count: int


@dataclass(frozen=True, slots=True)
class ToggleResult:
    phase: TogglePhase
    snapshot: ToggleSnapshot
    version: int
    error: RemoteError | None = None

    @property
    def ok(self) -> bool:
        return self.phase is TogglePhase.CONFIRMED


WriteFn = Callable[[bool], Awaitable[object]]
ErrorCallback = Callable[[RemoteError], None]


@dataclass(slots=True)
class _Deferred:
    active: bool | None
    count: int
    seq: int


class OptimisticToggle:
    def __init__(
        self,
        active: bool | None = None,
        count: int = 0,
        *,
        on_error: ErrorCallback | None = None,
        name: str = "toggle",
    ) -> None:
        self.name = name
        self._on_error = on_error
        self._active = active
        self._count = max(0, int(count))
        self._version = 0
        self._in_flight = 0
        self._phase = TogglePhase.IDLE
        self._latest_phase = TogglePhase.IDLE
        self._remote_seq = 0
        self._deferred: _Deferred | None = None
        self._baseline = ToggleSnapshot(active=active, count=self._count)

    @property
    def active(self) -> bool | None:
        return self._active

    @property
    def count(self) -> int:
        return self._count

    @property
    def version(self) -> int:
        return self._version

    @property
    def phase(self) -> TogglePhase:
        return self._phase

    @property
    def pending(self) -> bool:
        return self._in_flight > 0

    @property
    def state(self) -> ToggleState:
        if self._active is None:
            return ToggleState.UNKNOWN
        return ToggleState.ACTIVE if self._active else ToggleState.INACTIVE

    def snapshot(self) -> ToggleSnapshot:
        return ToggleSnapshot(active=self._active, count=self._count)

    def load(self, active: bool, count: int, *, seq: int | None = None) -> None:
        """Adopt freshly fetched values.

        ``seq`` is the realtime watermark the read is current as of. A read
        older than a snapshot already applied keeps that newer counter;
        without a ``seq`` the fetched values are taken as current.
        """

        self._active = bool(active)
        if seq is None or seq >= self._remote_seq:
            self._count = max(0, int(count))
            if seq is not None:
                self._remote_seq = seq
        self._baseline = self.snapshot()
        if not self.pending:
            self._phase = TogglePhase.IDLE

    async def toggle(self, write: WriteFn) -> ToggleResult:
        """Flip optimistically and await ``write(new_active)``.

        Remote failures never propagate: they are logged, handed to the
        ``on_error`` callback and returned on the result.
        """

        if self._active is None:
            raise ToggleStateError(f"{self.name} state has not been loaded")

        before = self.snapshot()
        target = not self._active
        self._active = target
        self._count = max(0, self._count + (1 if target else -1))
        self._version += 1
        version = self._version
        self._in_flight += 1
        self._phase = TogglePhase.PENDING

        try:
            await write(target)
        except RemoteError as exc:
            phase = self._restore(version, before)
            self._settle(version, phase)
            logger.warning("%s write failed (%s); %s", self.name, exc, phase.value)
            if self._on_error is not None:
                self._on_error(exc)
            return ToggleResult(phase=phase, snapshot=self.snapshot(), version=version, error=exc)
        except Exception:
            self._settle(version, self._restore(version, before))
            raise

        self._confirm(target)
        self._settle(version, TogglePhase.CONFIRMED)
        return ToggleResult(phase=TogglePhase.CONFIRMED, snapshot=self.snapshot(), version=version)

    def apply_remote(self, *, count: int, active: bool | None = None, seq: int) -> bool:
        """Apply a server snapshot; returns ``True`` when it changed local state now.

        ``active`` is left untouched when the snapshot does not carry it, as
        with engagement events that only report counters.
        """

        if seq <= self._remote_seq:
            return False
        if self.pending:
            if self._deferred is None or seq > self._deferred.seq:
                self._deferred = _Deferred(active=active, count=count, seq=seq)
            return False
        self._apply(active, count, seq)
        return True

    def _apply(self, active: bool | None, count: int, seq: int) -> None:
        if active is not None:
            self._active = active
        self._count = max(0, int(count))
        self._remote_seq = seq
        self._baseline = self.snapshot()

    def _confirm(self, target: bool) -> None:
        base = self._baseline
        if base.active is not target:
            self._baseline = ToggleSnapshot(active=target, count=max(0, base.count + (1 if target else -1)))

    def _restore(self, version: int, before: ToggleSnapshot) -> TogglePhase:
        if version != self._version:
            return TogglePhase.SUPERSEDED
        self._active = before.active
        self._count = before.count
        return TogglePhase.ROLLED_BACK

    def _settle(self, version: int, phase: TogglePhase) -> None:
        self._in_flight -= 1
        if version == self._version:
            self._latest_phase = phase
        if self._in_flight:
            return
        self._phase = self._latest_phase
        if self._phase is TogglePhase.ROLLED_BACK:
            self._active = self._baseline.active
            self._count = self._baseline.count
        deferred, self._deferred = self._deferred, None
        if deferred is not None and deferred.seq > self._remote_seq:
            self._apply(deferred.active, deferred.count, deferred.seq)


__all__ = [
    "OptimisticToggle",
    "ToggleResult",
    "ToggleSnapshot",
    "TogglePhase",
    "ToggleState",
    "ToggleStateError",
]
