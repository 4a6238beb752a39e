"""Node type descriptors from the list-node-types call."""

from __future__ import annotations

from pydantic import BaseModel, Field

__all__ = [
    "NodeInstanceType",
    "NodeType",
    "NodeTypeList",
]


class NodeInstanceType(BaseModel):
    """Local storage attached to the cloud instance behind a node type."""

    instance_type_id: str = ""
    local_disks: int = 0
    local_disk_size_gb: int = 0
    local_nvme_disks: int = 0
    local_nvme_disk_size_gb: int = 0

    model_config = {"frozen": True, "extra": "ignore"}


class NodeType(BaseModel):
    """A compute node shape offered by the cloud provider.

    ``node_instance_type`` is absent for some providers; ranking treats a
    missing value as neutral on the local-disk criteria.
    """

    node_type_id: str
    memory_mb: int = 0
    num_cores: float = 0
    num_gpus: int = 0
    instance_type_id: str = ""
    category: str = ""
    description: str = ""
    is_deprecated: bool = False
    is_hidden: bool = False
    is_io_cache_enabled: bool = False
    support_ebs_volumes: bool = False
    support_port_forwarding: bool = False
    support_cluster_tags: bool = False
    photon_worker_capable: bool = False
    photon_driver_capable: bool = False
    display_order: int = 0
    node_instance_type: NodeInstanceType | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @property
    def memory_gb(self) -> float:
        return self.memory_mb / 1024

    @property
    def local_disks(self) -> int:
        return self.node_instance_type.local_disks if self.node_instance_type else 0


class NodeTypeList(BaseModel):
    """Response of the list-node-types call.

    The list is owned by the caller; ``sort`` reorders it in place.
    """

    node_types: list[NodeType] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    def sort(self) -> None:
        """Rank node types in place, most desirable default first."""
        from cirrus.nodes.ranking import sort_node_types

        sort_node_types(self.node_types)
