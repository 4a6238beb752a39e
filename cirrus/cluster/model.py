"""Cluster records mirrored from the clusters API.

These are read-only views of what the remote system reports. They are parsed
from JSON responses with pydantic and never mutated locally.

Example:
    info = ClusterInfo.model_validate_json(response_body)
    if not info.can_reach(ClusterState.RUNNING):
        raise UnreachableStateError(info.state, ClusterState.RUNNING, info.cluster_id)
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from cirrus.cluster.state import ClusterState, can_reach, is_running_or_resizing, parse_state

__all__ = [
    "AutoScale",
    "ClusterInfo",
    "ClusterList",
    "ClusterSize",
    "TerminationReason",
]


class AutoScale(BaseModel):
    """Autoscaling bounds for a cluster."""

    min_workers: int = 0
    max_workers: int = 0

    model_config = {"frozen": True, "extra": "ignore"}


class ClusterSize(BaseModel):
    """Either a fixed worker count or autoscaling bounds."""

    num_workers: int = 0
    autoscale: AutoScale | None = None

    model_config = {"frozen": True, "extra": "ignore"}


class TerminationReason(BaseModel):
    """Termination code and parameters reported for a stopped cluster."""

    code: str = ""
    type: str = ""
    parameters: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True, "extra": "ignore"}


class ClusterInfo(BaseModel):
    """Cluster as returned by the clusters get/list calls."""

    cluster_id: str = ""
    cluster_name: str = ""
    spark_version: str = ""
    node_type_id: str = ""
    driver_node_type_id: str = ""
    num_workers: int = 0
    autoscale: AutoScale | None = None
    instance_pool_id: str = ""
    policy_id: str = ""
    autotermination_minutes: int = 0
    custom_tags: dict[str, str] = Field(default_factory=dict)
    default_tags: dict[str, str] = Field(default_factory=dict)
    state: ClusterState = ClusterState.UNKNOWN
    state_message: str = ""
    start_time: int = 0
    terminate_time: int = 0
    cluster_memory_mb: int = 0
    cluster_cores: float = 0
    termination_reason: TerminationReason | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("state", mode="before")
    @classmethod
    def _parse_state(cls, value: object) -> ClusterState:
        if value is None:
            return ClusterState.UNKNOWN
        if not isinstance(value, str):
            raise ValueError(f"state must be a string, got {type(value).__name__}")
        return parse_state(value)

    @property
    def is_running_or_resizing(self) -> bool:
        return is_running_or_resizing(self.state)

    @property
    def size(self) -> ClusterSize:
        return ClusterSize(num_workers=self.num_workers, autoscale=self.autoscale)

    def can_reach(self, desired: ClusterState | str) -> bool:
        """True if the cluster can still get to ``desired`` without intervention."""
        return can_reach(self.state, desired)


class ClusterList(BaseModel):
    """Response of the clusters list call."""

    clusters: list[ClusterInfo] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "ignore"}
