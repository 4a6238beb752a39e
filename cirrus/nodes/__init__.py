"""Node types - descriptors, deterministic ranking and selection."""

from cirrus.nodes.ranking import compare_node_types, sort_node_types, sorted_node_types
from cirrus.nodes.selection import NodeTypeRequest, matches, select_node_type
from cirrus.nodes.types import NodeInstanceType, NodeType, NodeTypeList

__all__ = [
    "NodeInstanceType",
    "NodeType",
    "NodeTypeList",
    "compare_node_types",
    "sort_node_types",
    "sorted_node_types",
    "NodeTypeRequest",
    "matches",
    "select_node_type",
]
