"""Cirrus - decision-making core for cluster and job infrastructure-as-code.

Example:

    from cirrus import ClusterState, can_reach, select_node_type, validate_job

    if not can_reach(observed, ClusterState.RUNNING):
        raise UnreachableStateError(observed, ClusterState.RUNNING)

    node_type = select_node_type(listing.node_types, NodeTypeRequest(min_cores=8))

    job = validate_job(JobSettings.from_dict(payload))
"""

from loguru import logger

# Cluster lifecycle
from cirrus.cluster import (
    STATE_MACHINE,
    ClusterInfo,
    ClusterState,
    can_reach,
    is_running_or_resizing,
    is_terminal,
    parse_state,
    wait_for_state,
)

# Configuration
from cirrus.config import WaitConfig, load_config

# Exceptions
from cirrus.core.exceptions import (
    AmbiguousTaskPayloadError,
    CirrusError,
    ConfigurationError,
    CyclicDependencyError,
    DanglingDependencyError,
    DuplicateTaskKeyError,
    GraphIntegrityError,
    MissingTaskKeyError,
    NoMatchingNodeTypeError,
    UnreachableStateError,
    WaitTimeoutError,
)

# Jobs
from cirrus.jobs import (
    Job,
    JobMode,
    JobSettings,
    Task,
    ValidatedJob,
    job_mode,
    sort_tasks_by_key,
    validate_job,
)

# Node types
from cirrus.nodes import (
    NodeType,
    NodeTypeList,
    NodeTypeRequest,
    compare_node_types,
    select_node_type,
    sort_node_types,
)

# Logging
from cirrus.observability import LogConfig, setup_logging, teardown_logging

# Library logging stays silent until setup_logging is called.
logger.disable("cirrus")

__all__ = [
    # Cluster lifecycle
    "ClusterState",
    "STATE_MACHINE",
    "ClusterInfo",
    "can_reach",
    "is_terminal",
    "is_running_or_resizing",
    "parse_state",
    "wait_for_state",
    # Node types
    "NodeType",
    "NodeTypeList",
    "NodeTypeRequest",
    "compare_node_types",
    "sort_node_types",
    "select_node_type",
    # Jobs
    "Job",
    "JobMode",
    "JobSettings",
    "Task",
    "ValidatedJob",
    "job_mode",
    "sort_tasks_by_key",
    "validate_job",
    # Configuration
    "WaitConfig",
    "load_config",
    # Logging
    "LogConfig",
    "setup_logging",
    "teardown_logging",
    # Exceptions
    "CirrusError",
    "ConfigurationError",
    "UnreachableStateError",
    "WaitTimeoutError",
    "NoMatchingNodeTypeError",
    "GraphIntegrityError",
    "DuplicateTaskKeyError",
    "MissingTaskKeyError",
    "DanglingDependencyError",
    "CyclicDependencyError",
    "AmbiguousTaskPayloadError",
]
