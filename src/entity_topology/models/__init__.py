"""Entity topology data models."""

from entity_topology.models.entity import EntityEdge, EntityGraph, EntityReference, EntityType
from entity_topology.models.layout import ClusterRegion, LayoutLink, LayoutNode, TopologyLayout

__all__ = [
    # Input graph
    "EntityType",
    "EntityReference",
    "EntityEdge",
    "EntityGraph",
    # Derived layout
    "LayoutNode",
    "LayoutLink",
    "ClusterRegion",
    "TopologyLayout",
]
