"""Node type selection.

Picks the best default node type that satisfies a set of minimum requirements.
Candidates are ranked first (see ``cirrus.nodes.ranking``), so the selected
node type is the smallest plain shape that fits.

Example:
    from cirrus.nodes import NodeTypeRequest, select_node_type

    listing = NodeTypeList.model_validate_json(body)
    node_type = select_node_type(
        listing.node_types,
        NodeTypeRequest(min_memory_gb=16, min_cores=4),
    )
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from cirrus.core.exceptions import NoMatchingNodeTypeError
from cirrus.nodes.ranking import sorted_node_types
from cirrus.nodes.types import NodeType

__all__ = [
    "NodeTypeRequest",
    "matches",
    "select_node_type",
]


@dataclass(frozen=True, slots=True)
class NodeTypeRequest:
    """Minimum requirements for a node type.

    Zero or empty values mean "no constraint".

    Attributes:
        min_memory_gb: Minimum memory in GB.
        gb_per_core: Minimum memory per core in GB.
        min_cores: Minimum number of cores.
        min_gpus: Minimum number of GPUs.
        local_disk: Require at least one local disk.
        category: Node type category (e.g. "General Purpose"), case-insensitive.
        photon_worker_capable: Require Photon worker support.
        photon_driver_capable: Require Photon driver support.
        support_port_forwarding: Require port forwarding support.
        is_io_cache_enabled: Require IO cache.
        include_deprecated: Allow deprecated node types as candidates.
    """

    min_memory_gb: float = 0
    gb_per_core: float = 0
    min_cores: float = 0
    min_gpus: int = 0
    local_disk: bool = False
    category: str = ""
    photon_worker_capable: bool = False
    photon_driver_capable: bool = False
    support_port_forwarding: bool = False
    is_io_cache_enabled: bool = False
    include_deprecated: bool = False


def matches(node_type: NodeType, request: NodeTypeRequest) -> bool:
    """Check if a single node type satisfies the request."""
    if node_type.is_hidden:
        return False
    if node_type.is_deprecated and not request.include_deprecated:
        return False
    if request.min_memory_gb and node_type.memory_gb < request.min_memory_gb:
        return False
    if request.gb_per_core:
        if node_type.num_cores <= 0:
            return False
        if node_type.memory_gb / node_type.num_cores < request.gb_per_core:
            return False
    if request.min_cores and node_type.num_cores < request.min_cores:
        return False
    if request.min_gpus and node_type.num_gpus < request.min_gpus:
        return False
    if request.local_disk and node_type.local_disks < 1:
        return False
    if request.category and node_type.category.lower() != request.category.lower():
        return False
    if request.photon_worker_capable and not node_type.photon_worker_capable:
        return False
    if request.photon_driver_capable and not node_type.photon_driver_capable:
        return False
    if request.support_port_forwarding and not node_type.support_port_forwarding:
        return False
    if request.is_io_cache_enabled and not node_type.is_io_cache_enabled:
        return False
    return True


def select_node_type(
    node_types: Iterable[NodeType],
    request: NodeTypeRequest | None = None,
) -> NodeType:
    """Select the best ranked node type that meets the requirements.

    The input is not modified.

    Args:
        node_types: Candidates from the list-node-types call.
        request: Minimum requirements; None means any visible, current node type.

    Returns:
        First matching node type in ranking order.

    Raises:
        NoMatchingNodeTypeError: If no node type meets the requirements.
    """
    request = request or NodeTypeRequest()
    ranked = sorted_node_types(node_types)
    log = logger.bind(component="node_type_selection")

    for node_type in ranked:
        if matches(node_type, request):
            log.debug(
                f"Selected {node_type.node_type_id} "
                f"({node_type.memory_gb:g}GB, {node_type.num_cores:g} cores, "
                f"{node_type.num_gpus} GPUs) out of {len(ranked)} candidates"
            )
            return node_type

    if not ranked:
        raise NoMatchingNodeTypeError("No node types available")

    max_mem = max(n.memory_gb for n in ranked)
    max_cores = max(n.num_cores for n in ranked)
    max_gpus = max(n.num_gpus for n in ranked)
    raise NoMatchingNodeTypeError(
        f"No node type found for {request}. "
        f"Maximum available: {max_mem:g}GB RAM, {max_cores:g} cores, {max_gpus} GPUs"
    )
