from __future__ import annotations

from collections.abc import Iterable

import pytest
from loguru import logger

from cirrus.cluster.state import ClusterState
from cirrus.cluster.wait import wait_for_state
from cirrus.core.exceptions import UnreachableStateError, WaitTimeoutError

pytestmark = [pytest.mark.xdist_group("unit")]


def _poller(states: Iterable[ClusterState | str | None]):
    remaining = list(states)
    calls: list[ClusterState | str | None] = []

    async def poll() -> ClusterState | str | None:
        state = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        calls.append(state)
        return state

    return poll, calls


@pytest.mark.asyncio
async def test_returns_once_desired_state_is_observed():
    poll, calls = _poller([ClusterState.PENDING, ClusterState.PENDING, ClusterState.RUNNING])
    result = await wait_for_state(poll, ClusterState.RUNNING, interval=0, timeout=5)
    assert result is ClusterState.RUNNING
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_already_in_desired_state():
    poll, calls = _poller([ClusterState.TERMINATED])
    assert await wait_for_state(poll, "TERMINATED", interval=0, timeout=5) is ClusterState.TERMINATED
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_fails_fast_when_desired_state_is_unreachable():
    poll, calls = _poller([ClusterState.PENDING, ClusterState.TERMINATING])
    with pytest.raises(UnreachableStateError) as exc_info:
        await wait_for_state(poll, ClusterState.RUNNING, interval=0, timeout=5, cluster_id="c-1")

    assert exc_info.value.current is ClusterState.TERMINATING
    assert exc_info.value.desired is ClusterState.RUNNING
    assert "c-1" in str(exc_info.value)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_unavailable_state_keeps_polling():
    poll, calls = _poller([None, None, "RUNNING"])
    assert await wait_for_state(poll, ClusterState.RUNNING, interval=0, timeout=5) is ClusterState.RUNNING
    assert calls == [None, None, "RUNNING"]


@pytest.mark.asyncio
async def test_times_out_while_state_is_still_reachable():
    poll, _ = _poller([ClusterState.PENDING])
    with pytest.raises(WaitTimeoutError, match="PENDING"):
        await wait_for_state(poll, ClusterState.RUNNING, interval=0.001, timeout=0.01)


@pytest.mark.asyncio
async def test_logs_state_changes():
    messages: list[str] = []
    logger.enable("cirrus")
    sink = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    try:
        poll, _ = _poller([ClusterState.PENDING, ClusterState.RUNNING])
        await wait_for_state(poll, ClusterState.RUNNING, interval=0, timeout=5)
    finally:
        logger.remove(sink)
        logger.disable("cirrus")

    assert any("PENDING" in m for m in messages)
    assert any("reached RUNNING" in m for m in messages)


@pytest.mark.asyncio
async def test_unrecognised_desired_state_is_rejected_before_polling():
    poll, calls = _poller(["HIBERNATING"])
    with pytest.raises(ValueError, match="FOO"):
        await wait_for_state(poll, "FOO", interval=0, timeout=5)
    assert calls == []
