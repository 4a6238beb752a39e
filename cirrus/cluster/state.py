"""Cluster lifecycle state machine.

The remote cluster API reports one of a fixed set of lifecycle states.
Transitions between them follow a static graph, which lets a poller decide
whether waiting for a desired state still makes sense:

    from cirrus.cluster.state import ClusterState, can_reach

    can_reach(ClusterState.PENDING, ClusterState.RUNNING)      # True
    can_reach(ClusterState.TERMINATED, ClusterState.RUNNING)   # False

States without an entry in the graph (TERMINATED, ERROR, UNKNOWN) are sinks.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Final

__all__ = [
    "ClusterState",
    "STATE_MACHINE",
    "StateGraph",
    "can_reach",
    "is_terminal",
    "is_running_or_resizing",
    "parse_state",
]


class ClusterState(StrEnum):
    """Cluster lifecycle states as reported by the clusters API."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    RESTARTING = "RESTARTING"
    RESIZING = "RESIZING"
    TERMINATING = "TERMINATING"
    TERMINATED = "TERMINATED"
    # No longer reported; failed creations go through TERMINATING instead.
    ERROR = "ERROR"
    # A cluster should never be in this state.
    UNKNOWN = "UNKNOWN"

    def can_reach(self, desired: ClusterState | str) -> bool:
        """True if this state can eventually transition into ``desired``."""
        return can_reach(self, desired)

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self)


type StateGraph = Mapping[ClusterState, frozenset[ClusterState]]

STATE_MACHINE: Final[StateGraph] = MappingProxyType({
    ClusterState.PENDING: frozenset({ClusterState.RUNNING, ClusterState.TERMINATING}),
    ClusterState.RUNNING: frozenset({
        ClusterState.RESIZING,
        ClusterState.RESTARTING,
        ClusterState.TERMINATING,
    }),
    ClusterState.RESTARTING: frozenset({ClusterState.RUNNING, ClusterState.TERMINATING}),
    ClusterState.RESIZING: frozenset({ClusterState.RUNNING, ClusterState.TERMINATING}),
    ClusterState.TERMINATING: frozenset({ClusterState.TERMINATED}),
})


def parse_state(value: ClusterState | str, *, strict: bool = False) -> ClusterState:
    """Parse a wire state string.

    Unrecognised values map to UNKNOWN, or raise ValueError when ``strict``.
    """
    match value:
        case ClusterState():
            return value
        case str():
            try:
                return ClusterState(value.strip().upper())
            except ValueError:
                if strict:
                    raise ValueError(f"Unknown cluster state: {value!r}") from None
                return ClusterState.UNKNOWN
        case _:
            raise TypeError(f"Expected ClusterState or str, got {type(value).__name__}")


def can_reach(
    current: ClusterState | str,
    desired: ClusterState | str,
    graph: StateGraph = STATE_MACHINE,
) -> bool:
    """Check whether ``desired`` is reachable from ``current``.

    Breadth-first search over the state graph. A state is trivially reachable
    from itself. A state with no entry in the graph ends its branch of the
    search without failing the whole query.

    Args:
        current: Observed cluster state.
        desired: Target cluster state. Must be a recognised state.
        graph: Adjacency mapping to search; defaults to the cluster lifecycle.

    Returns:
        True if a (possibly empty) path from ``current`` to ``desired`` exists.

    Raises:
        ValueError: If ``desired`` is not a recognised state.
    """
    current = parse_state(current)
    desired = parse_state(desired, strict=True)
    if current == desired:
        return True

    visited: set[ClusterState] = set()
    frontier: deque[ClusterState] = deque([current])
    while frontier:
        state = frontier.popleft()
        if state in visited:
            continue
        visited.add(state)
        for successor in graph.get(state, ()):
            if successor == desired:
                return True
            frontier.append(successor)
    return False


def is_terminal(state: ClusterState | str, graph: StateGraph = STATE_MACHINE) -> bool:
    """True if the state has no outgoing transitions."""
    return not graph.get(parse_state(state))


def is_running_or_resizing(state: ClusterState | str) -> bool:
    return parse_state(state) in (ClusterState.RUNNING, ClusterState.RESIZING)
