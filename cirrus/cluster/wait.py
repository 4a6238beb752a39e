"""Polling a cluster until it reaches a desired lifecycle state.

The poller keeps waiting only while the desired state is still reachable
from the observed one; a cluster that has already moved past the point of
no return (e.g. TERMINATED while RUNNING is desired) fails fast.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from cirrus.cluster.state import ClusterState, can_reach, parse_state
from cirrus.constants import DEFAULT_WAIT_INTERVAL, DEFAULT_WAIT_TIMEOUT
from cirrus.core.exceptions import UnreachableStateError, WaitTimeoutError

type StatePoll = Callable[[], Awaitable[ClusterState | str | None]]


async def wait_for_state(
    poll_fn: StatePoll,
    desired: ClusterState | str,
    *,
    timeout: float = DEFAULT_WAIT_TIMEOUT,
    interval: float = DEFAULT_WAIT_INTERVAL,
    cluster_id: str = "",
) -> ClusterState:
    """Wait until poll_fn reports the desired cluster state.

    Args:
        poll_fn: Async function returning the observed state, or None when
            the state is momentarily unavailable.
        desired: Target state.
        timeout: Maximum time to wait in seconds.
        interval: Time between polls in seconds.
        cluster_id: Cluster identifier for logs and error messages.

    Returns:
        The desired state, once observed.

    Raises:
        ValueError: If desired is not a recognised state.
        UnreachableStateError: If the observed state can no longer reach desired.
        WaitTimeoutError: If timeout is exceeded.
    """
    desired = parse_state(desired, strict=True)
    log = logger.bind(component="wait", cluster_id=cluster_id or "-")
    loop = asyncio.get_running_loop()
    start = loop.time()
    last: ClusterState | None = None

    while True:
        observed = await poll_fn()

        if observed is not None:
            state = parse_state(observed)
            if state != last:
                log.debug(f"Cluster is {state}, waiting for {desired}")
                last = state

            if state == desired:
                log.info(f"Cluster reached {desired} after {loop.time() - start:.1f}s")
                return state

            if not can_reach(state, desired):
                log.warning(f"Cluster is {state} and can no longer reach {desired}")
                raise UnreachableStateError(state, desired, cluster_id)

        elapsed = loop.time() - start
        if elapsed > timeout:
            subject = f"cluster {cluster_id}" if cluster_id else "cluster"
            raise WaitTimeoutError(
                f"Timeout waiting for {subject} to reach {desired} after {timeout:.1f}s "
                f"(last state: {last or 'unavailable'})"
            )

        await asyncio.sleep(interval)
