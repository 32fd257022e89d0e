"""Renderers: spatial scene and relationship matrix."""

from entity_topology.render.matrix import (
    EMPTY_MATRIX_MESSAGE,
    RelationshipMatrix,
    RelationshipRow,
    build_relationship_matrix,
)
from entity_topology.render.scene import EdgeShape, NodeShape, RegionShape, Scene, render_scene

__all__ = [
    "Scene",
    "RegionShape",
    "EdgeShape",
    "NodeShape",
    "render_scene",
    "RelationshipMatrix",
    "RelationshipRow",
    "build_relationship_matrix",
    "EMPTY_MATRIX_MESSAGE",
]
