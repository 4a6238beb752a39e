"""Deterministic ranking of node types.

Node type listings are heterogeneous: deprecated shapes, storage-optimized
shapes with local disks, GPU shapes. The ranking puts the plain, smallest,
current shape first so that the head of a sorted listing is a sensible default.

Criteria, earlier ones dominate:
    1. non-deprecated before deprecated
    2. fewer local disks, then smaller local disks (only if both sides report them)
    3. less memory
    4. fewer cores
    5. fewer GPUs
    6. instance type id, then node type id, ascending
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import cmp_to_key

from cirrus.nodes.types import NodeType

__all__ = [
    "compare_node_types",
    "sort_node_types",
    "sorted_node_types",
]


def _cmp[T: (int, float, str)](a: T, b: T) -> int:
    return (a > b) - (a < b)


def compare_node_types(a: NodeType, b: NodeType) -> int:
    """Three-way comparison; negative when ``a`` ranks before ``b``."""
    if a.is_deprecated != b.is_deprecated:
        return 1 if a.is_deprecated else -1

    if a.node_instance_type is not None and b.node_instance_type is not None:
        if result := _cmp(a.node_instance_type.local_disks, b.node_instance_type.local_disks):
            return result
        if result := _cmp(
            a.node_instance_type.local_disk_size_gb,
            b.node_instance_type.local_disk_size_gb,
        ):
            return result

    for left, right in (
        (a.memory_mb, b.memory_mb),
        (a.num_cores, b.num_cores),
        (a.num_gpus, b.num_gpus),
    ):
        if result := _cmp(left, right):
            return result

    return _cmp(a.instance_type_id, b.instance_type_id) or _cmp(a.node_type_id, b.node_type_id)


_rank_key = cmp_to_key(compare_node_types)


def sort_node_types(node_types: list[NodeType]) -> None:
    """Sort a caller-owned list in place, best default first.

    Must not be called concurrently on the same list.
    """
    node_types.sort(key=_rank_key)


def sorted_node_types(node_types: Iterable[NodeType]) -> list[NodeType]:
    """Return a new ranked list, leaving the input untouched."""
    return sorted(node_types, key=_rank_key)
