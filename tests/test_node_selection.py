import pytest

from cirrus.core.exceptions import NoMatchingNodeTypeError
from cirrus.nodes.selection import NodeTypeRequest, matches, select_node_type
from cirrus.nodes.types import NodeInstanceType, NodeType

pytestmark = [pytest.mark.xdist_group("unit")]

CATALOG = (
    NodeType(
        node_type_id="m5.large", instance_type_id="m5.large", memory_mb=8192, num_cores=2,
        category="General Purpose", node_instance_type=NodeInstanceType(instance_type_id="m5.large"),
    ),
    NodeType(
        node_type_id="m5.xlarge", instance_type_id="m5.xlarge", memory_mb=16384, num_cores=4,
        category="General Purpose", photon_worker_capable=True, photon_driver_capable=True,
        node_instance_type=NodeInstanceType(instance_type_id="m5.xlarge"),
    ),
    NodeType(
        node_type_id="r5.xlarge", instance_type_id="r5.xlarge", memory_mb=32768, num_cores=4,
        category="Memory Optimized", node_instance_type=NodeInstanceType(instance_type_id="r5.xlarge"),
    ),
    NodeType(
        node_type_id="i3.xlarge", instance_type_id="i3.xlarge", memory_mb=31232, num_cores=4,
        category="Storage Optimized", is_io_cache_enabled=True,
        node_instance_type=NodeInstanceType(
            instance_type_id="i3.xlarge", local_disks=1, local_disk_size_gb=950,
        ),
    ),
    NodeType(
        node_type_id="g4dn.xlarge", instance_type_id="g4dn.xlarge", memory_mb=16384, num_cores=4,
        num_gpus=1, category="GPU Accelerated",
        node_instance_type=NodeInstanceType(
            instance_type_id="g4dn.xlarge", local_disks=1, local_disk_size_gb=125,
        ),
    ),
    NodeType(
        node_type_id="m4.large", instance_type_id="m4.large", memory_mb=4096, num_cores=1,
        is_deprecated=True,
    ),
    NodeType(
        node_type_id="hidden.small", instance_type_id="hidden.small", memory_mb=1024, num_cores=1,
        is_hidden=True,
    ),
)


class TestSelectNodeType:
    def test_default_is_smallest_plain_node_type(self):
        assert select_node_type(CATALOG).node_type_id == "m5.large"

    def test_min_memory(self):
        assert select_node_type(CATALOG, NodeTypeRequest(min_memory_gb=20)).node_type_id == "r5.xlarge"

    def test_min_cores(self):
        assert select_node_type(CATALOG, NodeTypeRequest(min_cores=4)).node_type_id == "m5.xlarge"

    def test_min_gpus(self):
        assert select_node_type(CATALOG, NodeTypeRequest(min_gpus=1)).node_type_id == "g4dn.xlarge"

    def test_local_disk(self):
        assert select_node_type(CATALOG, NodeTypeRequest(local_disk=True)).node_type_id == "g4dn.xlarge"

    def test_gb_per_core(self):
        request = NodeTypeRequest(gb_per_core=8)
        assert select_node_type(CATALOG, request).node_type_id == "r5.xlarge"

    def test_category_is_case_insensitive(self):
        request = NodeTypeRequest(category="storage optimized")
        assert select_node_type(CATALOG, request).node_type_id == "i3.xlarge"

    def test_photon(self):
        request = NodeTypeRequest(photon_worker_capable=True, photon_driver_capable=True)
        assert select_node_type(CATALOG, request).node_type_id == "m5.xlarge"

    def test_io_cache(self):
        assert select_node_type(CATALOG, NodeTypeRequest(is_io_cache_enabled=True)).node_type_id == "i3.xlarge"

    def test_deprecated_only_when_allowed(self):
        assert not matches(CATALOG[5], NodeTypeRequest())
        assert matches(CATALOG[5], NodeTypeRequest(include_deprecated=True))
        # Even when allowed, deprecated types rank after current ones.
        assert select_node_type(CATALOG, NodeTypeRequest(include_deprecated=True)).node_type_id == "m5.large"

    def test_hidden_never_selected(self):
        assert not matches(CATALOG[6], NodeTypeRequest(include_deprecated=True))

    def test_input_is_not_reordered(self):
        candidates = list(reversed(CATALOG))
        select_node_type(candidates)
        assert candidates == list(reversed(CATALOG))

    def test_no_match_reports_maximum(self):
        with pytest.raises(NoMatchingNodeTypeError, match="Maximum available"):
            select_node_type(CATALOG, NodeTypeRequest(min_memory_gb=1024))

    def test_empty_catalog(self):
        with pytest.raises(NoMatchingNodeTypeError, match="No node types available"):
            select_node_type([])
