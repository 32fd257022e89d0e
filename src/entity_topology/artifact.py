"""Entity-graph chat artifact.

An artifact block holds a graph either directly or under a ``graph`` key.
It is shown inline as a short summary, or expanded / full screen as a
topology (or relationship matrix for dense graphs).
"""

import logging
from dataclasses import dataclass
from html import escape
from typing import Any

from pydantic import ValidationError

from entity_topology.models import EntityGraph
from entity_topology.schemas import EntityGraphSchema, WrappedGraphSchema
from entity_topology.view import render_snapshot, to_markup

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Unsupported entity graph artifact."
ARTIFACT_KIND = "entity-graph"

EXPANDED_SIZE = (760, 420)
FULLSCREEN_SIZE = (1180, 760)


@dataclass(frozen=True)
class Artifact:
    """Structured block attached to a chat message."""

    title: str
    block: Any
    kind: str = ARTIFACT_KIND


def parse_entity_graph(block: Any) -> EntityGraph | None:
    """Parse a direct or wrapped graph payload, or return None."""
    try:
        return EntityGraphSchema.model_validate(block).to_graph()
    except ValidationError:
        pass
    try:
        return WrappedGraphSchema.model_validate(block).graph.to_graph()
    except ValidationError as e:
        logger.debug(f"Unsupported entity graph artifact: {e.error_count()} validation errors")
        return None


def render_graph(graph: EntityGraph | None, width: float, height: float) -> str:
    """Topology, matrix or unsupported message for a parsed graph."""
    if graph is None:
        return f"<p>{UNSUPPORTED_MESSAGE}</p>"
    return to_markup(render_snapshot(graph, width, height))


def render_inline(artifact: Artifact) -> str:
    """Compact summary: kind, title and node/edge counts."""
    graph = parse_entity_graph(artifact.block)
    if graph is None:
        return f'<p class="cei-artifact-inline-preview">{UNSUPPORTED_MESSAGE}</p>'

    return (
        '<div class="cei-artifact-inline-header">'
        '<span aria-hidden="true" class="cei-artifact-inline-icon">\U0001F517</span>'
        '<span class="cei-artifact-inline-kind">Entity Graph</span></div>'
        f'<p class="cei-artifact-inline-title">{escape(artifact.title)}</p>'
        f'<p class="cei-artifact-inline-preview">'
        f"{len(graph.nodes)} nodes • {len(graph.edges)} edges</p>"
    )


def render_expanded(artifact: Artifact) -> str:
    graph = parse_entity_graph(artifact.block)
    content = render_graph(graph, *EXPANDED_SIZE)
    return f'<div class="cei-artifact-expanded-content">{content}</div>'


def render_fullscreen(artifact: Artifact) -> str:
    graph = parse_entity_graph(artifact.block)
    content = render_graph(graph, *FULLSCREEN_SIZE)
    return f'<div class="cei-artifact-fullscreen-content">{content}</div>'


PRESENTATIONS = {
    "inline": render_inline,
    "expanded": render_expanded,
    "fullscreen": render_fullscreen,
}
