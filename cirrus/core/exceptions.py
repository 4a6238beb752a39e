"""Custom exception hierarchy for Cirrus.

All cirrus-specific exceptions inherit from CirrusError, enabling
users to catch all cirrus exceptions with a single except clause.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cirrus.cluster.state import ClusterState


class CirrusError(Exception):
    """Base exception for all Cirrus errors."""


class ConfigurationError(CirrusError):
    """Raised for invalid configuration or missing required settings."""


# =============================================================================
# Cluster Lifecycle
# =============================================================================


class UnreachableStateError(CirrusError):
    """Raised when a cluster can no longer reach the desired state - do not retry."""

    def __init__(self, current: ClusterState, desired: ClusterState, cluster_id: str = "") -> None:
        self.current = current
        self.desired = desired
        self.cluster_id = cluster_id
        subject = f"Cluster {cluster_id}" if cluster_id else "Cluster"
        super().__init__(f"{subject} is {current} and cannot reach {desired}")


class WaitTimeoutError(CirrusError):
    """Raised when a cluster does not reach the desired state in time."""


# =============================================================================
# Node Types
# =============================================================================


class NoMatchingNodeTypeError(CirrusError):
    """Raised when no node type matches the requirements."""


# =============================================================================
# Job Task Graph
# =============================================================================


class GraphIntegrityError(CirrusError):
    """Base for structural errors in a job's task graph."""


class DuplicateTaskKeyError(GraphIntegrityError):
    """Raised when two tasks of one job share the same key."""

    def __init__(self, task_key: str) -> None:
        self.task_key = task_key
        super().__init__(f"Duplicate task key: {task_key!r}")


class MissingTaskKeyError(GraphIntegrityError):
    """Raised when a task of a multi-task job has an empty key."""

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"Task at position {position} has no task_key")


class DanglingDependencyError(GraphIntegrityError):
    """Raised when a task depends on a key that is not part of the job."""

    def __init__(self, task_key: str, dependency: str) -> None:
        self.task_key = task_key
        self.dependency = dependency
        super().__init__(f"Task {task_key!r} depends on unknown task {dependency!r}")


class CyclicDependencyError(GraphIntegrityError):
    """Raised when task dependencies form a cycle."""

    def __init__(self, task_key: str, cycle: Sequence[str] = ()) -> None:
        self.task_key = task_key
        self.cycle = tuple(cycle)
        path = " -> ".join(self.cycle) if self.cycle else task_key
        super().__init__(f"Cyclic dependency involving task {task_key!r}: {path}")


class AmbiguousTaskPayloadError(GraphIntegrityError):
    """Raised when a task sets zero or several task kinds."""

    def __init__(self, task_key: str, kinds: Sequence[str] = ()) -> None:
        self.task_key = task_key
        self.kinds = tuple(kinds)
        owner = f"Task {task_key!r}" if task_key else "Job"
        if self.kinds:
            detail = f"sets multiple task kinds: {', '.join(self.kinds)}"
        else:
            detail = "sets no task kind"
        super().__init__(f"{owner} {detail}")
