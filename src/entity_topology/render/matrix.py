"""Relationship matrix - simulation-free fallback for dense graphs."""

import logging
from dataclasses import dataclass
from html import escape
from typing import Callable, Literal

from entity_topology.models import EntityGraph, EntityReference

logger = logging.getLogger(__name__)

EMPTY_MATRIX_MESSAGE = "No entity relationships to display."
MATRIX_HEADERS = ("Source Entity", "Relationship", "Target Entity")

NodeClickHandler = Callable[[EntityReference], None]


@dataclass(frozen=True)
class RelationshipRow:
    """One ``(source, relationship, target)`` line of the matrix."""

    source: EntityReference
    relationship_type: str
    target: EntityReference


@dataclass
class RelationshipMatrix:
    """Sorted list of every valid edge with clickable endpoints."""

    rows: list[RelationshipRow]
    on_node_click: NodeClickHandler | None = None

    @property
    def empty(self) -> bool:
        return not self.rows

    def activate(self, row_index: int, side: Literal["source", "target"]) -> EntityReference:
        """Click an entity name, forwarding it to the node-click callback."""
        row = self.rows[row_index]
        entity = row.source if side == "source" else row.target
        if self.on_node_click is not None:
            self.on_node_click(entity)
        return entity

    def to_html(self) -> str:
        """Serialise as an HTML table, or the empty-state message."""
        if self.empty:
            return (
                '<div class="cei-entity-matrix" data-testid="entity-relationship-matrix">'
                f'<p class="cei-entity-matrix-empty">{EMPTY_MATRIX_MESSAGE}</p></div>'
            )

        header = "".join(f'<th scope="col">{title}</th>' for title in MATRIX_HEADERS)
        body = []
        for index, row in enumerate(self.rows):
            body.append(
                f'<tr data-row="{index}">'
                f"<td>{_entity_button(row.source, index, 'source')}</td>"
                f"<td>{escape(row.relationship_type)}</td>"
                f"<td>{_entity_button(row.target, index, 'target')}</td>"
                "</tr>"
            )
        return (
            '<div class="cei-entity-matrix" data-testid="entity-relationship-matrix">'
            f"<table><thead><tr>{header}</tr></thead>"
            f"<tbody>{''.join(body)}</tbody></table></div>"
        )


def _entity_button(entity: EntityReference, row_index: int, side: str) -> str:
    return (
        f'<button class="cei-entity-matrix-btn" type="button" '
        f'data-entity-id="{escape(entity.id)}" data-row="{row_index}" data-side="{side}">'
        f"{escape(entity.name)}</button>"
    )


def build_relationship_matrix(
    graph: EntityGraph,
    on_node_click: NodeClickHandler | None = None,
) -> RelationshipMatrix:
    """
    Build matrix rows from the graph's valid edges.

    Rows are sorted ascending by relationship type. The sort is stable, so
    edges sharing a relationship type keep their original order.
    """
    edges = sorted(graph.valid_edges(), key=lambda edge: edge.relationship_type)
    rows = [
        RelationshipRow(
            source=edge.source,
            relationship_type=edge.relationship_type,
            target=edge.target,
        )
        for edge in edges
    ]
    logger.debug(f"Built relationship matrix with {len(rows)} rows")
    return RelationshipMatrix(rows=rows, on_node_click=on_node_click)
