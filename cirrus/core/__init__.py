"""Core - exception hierarchy."""

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

__all__ = [
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
