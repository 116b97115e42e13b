"""Behavioural tests for the optimistic follow/like toggle."""
from __future__ import annotations

import asyncio
import itertools

import pytest

from pawhub.client.remote import RemoteError
from pawhub.client.toggle import (
    OptimisticToggle,
    TogglePhase,
    ToggleSnapshot,
    ToggleState,
    ToggleStateError,
)

INITIAL_STATES = [(False, 0), (False, 10), (True, 1), (True, 42), (True, 0)]


async def _succeed(_active: bool) -> None:
    return None


async def _fail(_active: bool) -> None:
    raise RemoteError(503, "backend unavailable")


@pytest.mark.parametrize("active,count", INITIAL_STATES)
def test_successful_write_flips_exactly_once(active, count):
    toggle = OptimisticToggle(active, count)

    result = asyncio.run(toggle.toggle(_succeed))

    expected_count = max(0, count + (1 if not active else -1))
    assert result.phase is TogglePhase.CONFIRMED
    assert result.ok
    assert toggle.snapshot() == ToggleSnapshot(active=not active, count=expected_count)
    assert toggle.phase is TogglePhase.CONFIRMED
    assert toggle.version == 1


@pytest.mark.parametrize("active,count", INITIAL_STATES)
def test_failed_write_restores_pre_toggle_state(active, count):
    errors: list[RemoteError] = []
    toggle = OptimisticToggle(active, count, on_error=errors.append)

    result = asyncio.run(toggle.toggle(_fail))

    assert result.phase is TogglePhase.ROLLED_BACK
    assert toggle.snapshot() == ToggleSnapshot(active=active, count=count)
    assert result.error is errors[0]
    assert errors[0].status_code == 503
    assert not toggle.pending


@pytest.mark.parametrize("outcomes", list(itertools.product([_succeed, _fail], repeat=4)))
def test_counter_never_goes_negative(outcomes):
    toggle = OptimisticToggle(True, 0)

    async def run() -> None:
        for write in outcomes:
            await toggle.toggle(write)
            assert toggle.count >= 0

    asyncio.run(run())


def test_follow_rollback_example():
    toggle = OptimisticToggle(False, 10)
    seen_during_write: list[ToggleSnapshot] = []

    async def failing_insert(active: bool) -> None:
        assert active is True
        seen_during_write.append(toggle.snapshot())
        raise RemoteError(500, "insert failed")

    result = asyncio.run(toggle.toggle(failing_insert))

    assert seen_during_write == [ToggleSnapshot(active=True, count=11)]
    assert result.phase is TogglePhase.ROLLED_BACK
    assert toggle.snapshot() == ToggleSnapshot(active=False, count=10)


def test_like_confirmed_example_stays_put():
    toggle = OptimisticToggle(False, 0)

    result = asyncio.run(toggle.toggle(_succeed))

    assert result.snapshot == ToggleSnapshot(active=True, count=1)
    assert toggle.snapshot() == ToggleSnapshot(active=True, count=1)
    assert toggle.state is ToggleState.ACTIVE


def test_toggle_before_load_is_rejected():
    toggle = OptimisticToggle()
    assert toggle.state is ToggleState.UNKNOWN

    with pytest.raises(ToggleStateError):
        asyncio.run(toggle.toggle(_succeed))

    toggle.load(False, 3)
    assert toggle.state is ToggleState.INACTIVE


def test_superseded_failure_leaves_newer_toggle_in_charge():
    async def scenario() -> None:
        toggle = OptimisticToggle(False, 10)
        first_gate, second_gate = asyncio.Event(), asyncio.Event()

        async def slow_failure(_active: bool) -> None:
            await first_gate.wait()
            raise RemoteError(500, "late failure")

        async def slow_success(_active: bool) -> None:
            await second_gate.wait()

        first = asyncio.create_task(toggle.toggle(slow_failure))
        await asyncio.sleep(0)
        assert toggle.snapshot() == ToggleSnapshot(active=True, count=11)

        second = asyncio.create_task(toggle.toggle(slow_success))
        await asyncio.sleep(0)
        assert toggle.snapshot() == ToggleSnapshot(active=False, count=10)

        first_gate.set()
        first_result = await first
        assert first_result.phase is TogglePhase.SUPERSEDED
        assert toggle.snapshot() == ToggleSnapshot(active=False, count=10)
        assert toggle.pending
        assert toggle.phase is TogglePhase.PENDING

        second_gate.set()
        second_result = await second
        assert second_result.phase is TogglePhase.CONFIRMED
        assert toggle.phase is TogglePhase.CONFIRMED
        assert toggle.snapshot() == ToggleSnapshot(active=False, count=10)

    asyncio.run(scenario())


@pytest.mark.parametrize("newest_first", [True, False])
def test_overlapping_failures_return_to_confirmed_state(newest_first):
    async def scenario() -> None:
        toggle = OptimisticToggle(False, 10)
        first_gate, second_gate = asyncio.Event(), asyncio.Event()

        def gated_failure(gate: asyncio.Event):
            async def write(_active: bool) -> None:
                await gate.wait()
                raise RemoteError(500, "write rejected")

            return write

        first = asyncio.create_task(toggle.toggle(gated_failure(first_gate)))
        await asyncio.sleep(0)
        second = asyncio.create_task(toggle.toggle(gated_failure(second_gate)))
        await asyncio.sleep(0)
        assert toggle.snapshot() == ToggleSnapshot(active=False, count=10)

        order = [(first_gate, first), (second_gate, second)]
        if newest_first:
            order.reverse()
        for gate, task in order:
            gate.set()
            await task

        assert first.result().phase is TogglePhase.SUPERSEDED
        assert second.result().phase is TogglePhase.ROLLED_BACK
        assert toggle.snapshot() == ToggleSnapshot(active=False, count=10)
        assert toggle.phase is TogglePhase.ROLLED_BACK
        assert not toggle.pending

    asyncio.run(scenario())


def test_newest_failure_keeps_state_confirmed_by_older_write():
    async def scenario() -> None:
        toggle = OptimisticToggle(False, 10)
        first_gate, second_gate = asyncio.Event(), asyncio.Event()

        async def slow_success(_active: bool) -> None:
            await first_gate.wait()

        async def slow_failure(_active: bool) -> None:
            await second_gate.wait()
            raise RemoteError(500, "write rejected")

        first = asyncio.create_task(toggle.toggle(slow_success))
        await asyncio.sleep(0)
        second = asyncio.create_task(toggle.toggle(slow_failure))
        await asyncio.sleep(0)

        first_gate.set()
        await first
        second_gate.set()
        await second

        assert toggle.snapshot() == ToggleSnapshot(active=True, count=11)
        assert toggle.phase is TogglePhase.ROLLED_BACK

    asyncio.run(scenario())


def test_latest_failure_restores_its_own_snapshot():
    async def scenario() -> None:
        toggle = OptimisticToggle(False, 10)
        gate = asyncio.Event()

        async def slow_success(_active: bool) -> None:
            await gate.wait()

        first = asyncio.create_task(toggle.toggle(slow_success))
        await asyncio.sleep(0)
        second = await toggle.toggle(_fail)

        assert second.phase is TogglePhase.ROLLED_BACK
        assert toggle.snapshot() == ToggleSnapshot(active=True, count=11)

        gate.set()
        assert (await first).phase is TogglePhase.CONFIRMED
        assert toggle.snapshot() == ToggleSnapshot(active=True, count=11)
        assert toggle.phase is TogglePhase.ROLLED_BACK

    asyncio.run(scenario())


def test_remote_snapshots_ignore_stale_sequence_numbers():
    toggle = OptimisticToggle(True, 5)

    assert toggle.apply_remote(count=7, seq=3) is True
    assert toggle.apply_remote(count=2, seq=2) is False
    assert toggle.apply_remote(count=2, seq=3) is False
    assert toggle.snapshot() == ToggleSnapshot(active=True, count=7)

    assert toggle.apply_remote(count=0, active=False, seq=4) is True
    assert toggle.snapshot() == ToggleSnapshot(active=False, count=0)


def test_load_respects_realtime_watermark():
    toggle = OptimisticToggle()
    toggle.load(False, 10, seq=5)

    assert toggle.apply_remote(count=11, seq=5) is False
    assert toggle.apply_remote(count=12, seq=7) is True

    toggle.load(True, 9, seq=6)
    assert toggle.snapshot() == ToggleSnapshot(active=True, count=12)

    toggle.load(False, 14, seq=8)
    assert toggle.snapshot() == ToggleSnapshot(active=False, count=14)
    assert toggle.apply_remote(count=3, seq=8) is False


def test_remote_snapshot_waits_for_pending_write():
    async def scenario() -> None:
        toggle = OptimisticToggle(False, 10)
        gate = asyncio.Event()

        async def slow_success(_active: bool) -> None:
            await gate.wait()

        task = asyncio.create_task(toggle.toggle(slow_success))
        await asyncio.sleep(0)

        assert toggle.apply_remote(count=12, seq=1) is False
        assert toggle.apply_remote(count=13, seq=2) is False
        assert toggle.snapshot() == ToggleSnapshot(active=True, count=11)

        gate.set()
        await task
        assert toggle.snapshot() == ToggleSnapshot(active=True, count=13)

    asyncio.run(scenario())


def test_unexpected_exceptions_roll_back_and_propagate():
    toggle = OptimisticToggle(True, 4)

    async def broken(_active: bool) -> None:
        raise KeyError("bug")

    with pytest.raises(KeyError):
        asyncio.run(toggle.toggle(broken))
    assert toggle.snapshot() == ToggleSnapshot(active=True, count=4)
    assert not toggle.pending
