"""API routes for the topology renderer.

Provides:
- /topology/render for one-shot SVG / matrix rendering of a graph
- /topology/artifact/{presentation} for chat artifact previews
- /topology/entity-types for the display metadata table
- /health
"""

import logging
from typing import Any, Literal

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from entity_topology.artifact import PRESENTATIONS, Artifact, parse_entity_graph
from entity_topology.entity_types import ENTITY_TYPE_CONFIG
from entity_topology.render import RelationshipMatrix, Scene
from entity_topology.schemas import EntityGraphSchema
from entity_topology.view import render_snapshot, to_markup

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Models
# ============================================================================


class RenderRequest(BaseModel):
    """Graph to render plus optional canvas size."""

    graph: EntityGraphSchema
    width: int | None = Field(default=None, gt=0, le=8192)
    height: int | None = Field(default=None, gt=0, le=8192)
    ticks: int | None = Field(default=None, ge=0, le=5000)


class RenderResponse(BaseModel):
    """Rendered markup and what went into it."""

    mode: Literal["spatial", "matrix", "empty"]
    content: str
    node_count: int
    edge_count: int
    rendered_edge_count: int


class ArtifactRequest(BaseModel):
    """Chat artifact payload."""

    title: str = ""
    block: Any


class EntityTypeInfo(BaseModel):
    """Display metadata for one entity type."""

    type: str
    label: str
    icon: str
    color: str
    category: str


class HealthResponse(BaseModel):
    status: str = "ok"


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check."""
    return HealthResponse()


@router.get("/topology/entity-types", response_model=list[EntityTypeInfo])
async def entity_types() -> list[EntityTypeInfo]:
    """List every entity type with its display metadata."""
    return [
        EntityTypeInfo(
            type=entity_type.value,
            label=config.label,
            icon=config.icon,
            color=config.color,
            category=config.category,
        )
        for entity_type, config in ENTITY_TYPE_CONFIG.items()
    ]


@router.post("/topology/render", response_model=RenderResponse)
def render_topology(request: RenderRequest) -> RenderResponse:
    """Render a graph as a settled topology SVG or, for dense graphs, a matrix."""
    graph = request.graph.to_graph()
    output = render_snapshot(graph, request.width, request.height, request.ticks)

    if isinstance(output, Scene):
        mode, rendered_edges = "spatial", len(output.edges)
    elif isinstance(output, RelationshipMatrix):
        mode, rendered_edges = "matrix", len(output.rows)
    else:
        mode, rendered_edges = "empty", 0

    logger.info(
        f"Rendered graph: mode={mode}, nodes={len(graph.nodes)}, "
        f"edges={rendered_edges}/{len(graph.edges)}"
    )
    return RenderResponse(
        mode=mode,
        content=to_markup(output),
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
        rendered_edge_count=rendered_edges,
    )


@router.post("/topology/artifact/{presentation}", response_class=HTMLResponse)
async def render_artifact(presentation: str, request: ArtifactRequest) -> str:
    """Render an entity-graph artifact inline, expanded or full screen."""
    renderer = PRESENTATIONS.get(presentation)
    if renderer is None:
        raise HTTPException(status_code=404, detail=f"Unknown presentation: {presentation}")

    if parse_entity_graph(request.block) is None:
        raise HTTPException(status_code=400, detail="Unsupported entity graph artifact")

    return renderer(Artifact(title=request.title, block=request.block))
