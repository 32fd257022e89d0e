"""Cluster layout planner.

Places one anchor per entity type on a ring around the canvas centre and
seeds every node next to its anchor. Seeding is deterministic: the same
graph always starts from the same positions.
"""

import logging
import math
from collections import Counter

from entity_topology.models import (
    ClusterRegion,
    EntityGraph,
    EntityType,
    LayoutLink,
    LayoutNode,
    TopologyLayout,
)

logger = logging.getLogger(__name__)

RING_RADIUS_RATIO = 0.28


def compute_cluster_anchors(
    types: list[EntityType],
    width: float,
    height: float,
) -> dict[EntityType, tuple[float, float]]:
    """Evenly space one anchor per type on a ring centred in the canvas."""
    ring_radius = min(width, height) * RING_RADIUS_RATIO
    center_x = width / 2
    center_y = height / 2
    count = max(len(types), 1)

    anchors: dict[EntityType, tuple[float, float]] = {}
    for index, entity_type in enumerate(types):
        angle = 2 * math.pi * index / count
        anchors[entity_type] = (
            center_x + math.cos(angle) * ring_radius,
            center_y + math.sin(angle) * ring_radius,
        )
    return anchors


def seed_offset(index: int) -> tuple[float, float]:
    """Small index-derived offset so same-type nodes never start coincident."""
    return ((index % 5) * 8, (index % 7) * 6)


def build_layout(graph: EntityGraph, width: float, height: float) -> TopologyLayout:
    """
    Compute the initial layout for a graph.

    Args:
        graph: Input entity graph
        width: Canvas width in layout units
        height: Canvas height in layout units

    Returns:
        TopologyLayout with seeded nodes, resolved links and cluster regions
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")

    # Distinct types in first-seen order
    types = list(dict.fromkeys(node.type for node in graph.nodes))
    anchors = compute_cluster_anchors(types, width, height)

    nodes: list[LayoutNode] = []
    seen_ids: set[str] = set()
    for index, entity in enumerate(graph.nodes):
        if entity.id in seen_ids:
            logger.debug(f"Skipping duplicate node id: {entity.id}")
            continue
        seen_ids.add(entity.id)

        anchor_x, anchor_y = anchors[entity.type]
        dx, dy = seed_offset(index)
        nodes.append(
            LayoutNode(
                entity=entity,
                index=len(nodes),
                x=anchor_x + dx,
                y=anchor_y + dy,
                cluster_x=anchor_x,
                cluster_y=anchor_y,
            )
        )

    by_id = {node.id: node for node in nodes}
    links = [
        LayoutLink(
            source=by_id[edge.source.id],
            target=by_id[edge.target.id],
            relationship_type=edge.relationship_type,
        )
        for edge in graph.valid_edges()
    ]

    member_counts = Counter(node.entity.type for node in nodes)
    regions = [
        ClusterRegion(
            type=entity_type,
            x=anchors[entity_type][0],
            y=anchors[entity_type][1],
            member_count=member_counts[entity_type],
        )
        for entity_type in types
    ]

    return TopologyLayout(
        width=width,
        height=height,
        nodes=nodes,
        links=links,
        regions=regions,
    )
