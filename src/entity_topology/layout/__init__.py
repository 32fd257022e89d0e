"""Initial cluster layout."""

from entity_topology.layout.planner import build_layout, compute_cluster_anchors, seed_offset

__all__ = ["build_layout", "compute_cluster_anchors", "seed_offset"]
