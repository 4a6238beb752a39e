"""Cluster event vocabulary.

Event types and request/response records of the cluster events call.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, Field

from cirrus.cluster.model import AutoScale, ClusterSize, TerminationReason

__all__ = [
    "ClusterEvent",
    "ClusterEventType",
    "EventDetails",
    "EventsRequest",
    "EventType",
    "EventsResponse",
    "SortOrder",
]


class SortOrder(StrEnum):
    """Ordering of paginated listings."""

    ASC = "ASC"
    DESC = "DESC"


class ClusterEventType(StrEnum):
    """Types of events the clusters API records."""

    CREATING = "CREATING"
    DID_NOT_EXPAND_DISK = "DID_NOT_EXPAND_DISK"
    EXPANDED_DISK = "EXPANDED_DISK"
    FAILED_TO_EXPAND_DISK = "FAILED_TO_EXPAND_DISK"
    INIT_SCRIPTS_STARTING = "INIT_SCRIPTS_STARTING"
    INIT_SCRIPTS_FINISHED = "INIT_SCRIPTS_FINISHED"
    STARTING = "STARTING"
    RESTARTING = "RESTARTING"
    TERMINATING = "TERMINATING"
    EDITED = "EDITED"
    RUNNING = "RUNNING"
    RESIZING = "RESIZING"
    UPSIZE_COMPLETED = "UPSIZE_COMPLETED"
    NODES_LOST = "NODES_LOST"
    DRIVER_HEALTHY = "DRIVER_HEALTHY"
    DRIVER_UNAVAILABLE = "DRIVER_UNAVAILABLE"
    SPARK_EXCEPTION = "SPARK_EXCEPTION"
    DRIVER_NOT_RESPONDING = "DRIVER_NOT_RESPONDING"
    DBFS_DOWN = "DBFS_DOWN"
    METASTORE_DOWN = "METASTORE_DOWN"
    NODE_BLACKLISTED = "NODE_BLACKLISTED"
    PINNED = "PINNED"
    UNPINNED = "UNPINNED"


# Event types added remotely after this list was written are kept as plain strings.
EventType = Annotated[ClusterEventType | str, Field(union_mode="left_to_right")]


class EventDetails(BaseModel):
    """Details attached to a cluster event; which fields are set depends on the type."""

    current_num_workers: int = 0
    target_num_workers: int = 0
    previous_cluster_size: ClusterSize | None = None
    cluster_size: ClusterSize | None = None
    cause: str | None = None
    reason: TerminationReason | None = None
    user: str = ""

    model_config = {"frozen": True, "extra": "ignore"}

    @property
    def target_autoscale(self) -> AutoScale | None:
        return self.cluster_size.autoscale if self.cluster_size else None


class ClusterEvent(BaseModel):
    cluster_id: str
    timestamp: int = 0
    type: EventType
    details: EventDetails = Field(default_factory=EventDetails)

    model_config = {"frozen": True, "extra": "ignore"}


class EventsRequest(BaseModel):
    """Query for the cluster events call.

    ``max_items`` bounds client-side pagination and is never sent.
    """

    cluster_id: str
    start_time: int = 0
    end_time: int = 0
    order: SortOrder | None = None
    event_types: list[EventType] = Field(default_factory=list)
    offset: int = 0
    limit: int = 0
    max_items: int = Field(default=0, exclude=True)

    model_config = {"frozen": True, "extra": "ignore"}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the wire, dropping unset optional fields."""
        data = self.model_dump(mode="json")
        return {k: v for k, v in data.items() if k == "cluster_id" or v}


class EventsResponse(BaseModel):
    events: list[ClusterEvent] = Field(default_factory=list)
    next_page: EventsRequest | None = None
    total_count: int = 0

    model_config = {"frozen": True, "extra": "ignore"}
