"""Cluster module - lifecycle state machine, API records and state polling."""

from cirrus.cluster.events import (
    ClusterEvent,
    ClusterEventType,
    EventDetails,
    EventsRequest,
    EventsResponse,
    SortOrder,
)
from cirrus.cluster.model import (
    AutoScale,
    ClusterInfo,
    ClusterList,
    ClusterSize,
    TerminationReason,
)
from cirrus.cluster.state import (
    STATE_MACHINE,
    ClusterState,
    StateGraph,
    can_reach,
    is_running_or_resizing,
    is_terminal,
    parse_state,
)
from cirrus.cluster.wait import wait_for_state

__all__ = [
    # State machine
    "ClusterState",
    "STATE_MACHINE",
    "StateGraph",
    "can_reach",
    "is_terminal",
    "is_running_or_resizing",
    "parse_state",
    # Polling
    "wait_for_state",
    # Records
    "AutoScale",
    "ClusterInfo",
    "ClusterList",
    "ClusterSize",
    "TerminationReason",
    # Events
    "ClusterEvent",
    "ClusterEventType",
    "EventDetails",
    "EventsRequest",
    "EventsResponse",
    "SortOrder",
]
