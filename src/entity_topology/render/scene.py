"""Scene renderer.

``render_scene`` is a pure function of the current layout state, zoom
transform and tooltip. It returns drawing primitives in paint order
(regions, edges, nodes, tooltip) which ``Scene.to_svg`` serialises.
"""

from dataclasses import dataclass, field
from html import escape

from entity_topology.entity_types import type_caption, type_color
from entity_topology.interaction.tooltip import TooltipState
from entity_topology.interaction.zoom import IDENTITY, ZoomTransform
from entity_topology.models import ClusterRegion, EntityReference, LayoutLink, LayoutNode

NODE_RADIUS = 11
NODE_LABEL_DX = 15
NODE_LABEL_DY = 4
REGION_LABEL_DY = -70
EDGE_LABEL_DY = -4
TOOLTIP_LINE_HEIGHT = 16


@dataclass(frozen=True)
class RegionShape:
    """Dashed circle marking an entity-type cluster."""

    cx: float
    cy: float
    r: float
    color: str
    label: str

    @property
    def label_position(self) -> tuple[float, float]:
        return (self.cx, self.cy + REGION_LABEL_DY)


@dataclass(frozen=True)
class EdgeShape:
    """Relationship line with a label at its midpoint."""

    source_id: str
    target_id: str
    x1: float
    y1: float
    x2: float
    y2: float
    label: str

    @property
    def label_position(self) -> tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2 + EDGE_LABEL_DY)


@dataclass(frozen=True)
class NodeShape:
    """Coloured node mark with the entity name beside it."""

    entity: EntityReference
    x: float
    y: float
    color: str
    r: float = NODE_RADIUS

    @property
    def id(self) -> str:
        return self.entity.id

    @property
    def label(self) -> str:
        return self.entity.name

    @property
    def label_position(self) -> tuple[float, float]:
        return (self.x + NODE_LABEL_DX, self.y + NODE_LABEL_DY)


@dataclass(frozen=True)
class Scene:
    """Complete visual output for one frame."""

    width: float
    height: float
    transform: ZoomTransform = IDENTITY
    regions: tuple[RegionShape, ...] = ()
    edges: tuple[EdgeShape, ...] = ()
    nodes: tuple[NodeShape, ...] = ()
    tooltip: TooltipState | None = None

    def to_svg(self) -> str:
        """Serialise the scene as a standalone SVG document."""
        width, height = f"{self.width:g}", f"{self.height:g}"
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" class="cei-entity-topology-canvas" '
            f'role="img" width="{width}" height="{height}" viewBox="0 0 {width} {height}">',
            f'<g transform="{self.transform.to_svg()}">',
        ]

        for region in self.regions:
            label_x, label_y = region.label_position
            parts.append(
                f'<g><circle class="cei-entity-region" cx="{region.cx:g}" cy="{region.cy:g}" '
                f'r="{region.r:g}" fill="{region.color}" stroke="{region.color}" '
                f'stroke-dasharray="4 6"/>'
                f'<text class="cei-entity-region-label" text-anchor="middle" '
                f'x="{label_x:g}" y="{label_y:g}">{escape(region.label)}</text></g>'
            )

        for edge in self.edges:
            label_x, label_y = edge.label_position
            parts.append(
                f'<g><line class="cei-entity-link" data-testid="entity-topology-edge" '
                f'x1="{edge.x1:g}" y1="{edge.y1:g}" x2="{edge.x2:g}" y2="{edge.y2:g}"/>'
                f'<text class="cei-entity-link-label" x="{label_x:g}" y="{label_y:g}">'
                f"{escape(edge.label)}</text></g>"
            )

        for node in self.nodes:
            parts.append(
                f'<g class="cei-entity-node" data-testid="entity-topology-node" '
                f'data-entity-id="{escape(node.entity.id)}" '
                f'transform="translate({node.x:g}, {node.y:g})">'
                f'<circle cx="0" cy="0" r="{node.r:g}" data-node-circle="true" '
                f'fill="{node.color}" stroke="var(--bg-primary)" stroke-width="1.5"/>'
                f'<text class="cei-entity-node-label" x="{NODE_LABEL_DX}" y="{NODE_LABEL_DY}">'
                f"{escape(node.label)}</text></g>"
            )

        parts.append("</g>")

        if self.tooltip is not None:
            parts.append(
                f'<g class="cei-entity-tooltip" role="status" '
                f'transform="translate({self.tooltip.screen_x:g}, {self.tooltip.screen_y:g})">'
            )
            for i, line in enumerate(self.tooltip.lines()):
                weight = ' font-weight="bold"' if i == 0 else ""
                parts.append(
                    f'<text x="0" y="{(i + 1) * TOOLTIP_LINE_HEIGHT}"{weight}>{escape(line)}</text>'
                )
            parts.append("</g>")

        parts.append("</svg>")
        return "".join(parts)


def render_scene(
    nodes: list[LayoutNode],
    regions: list[ClusterRegion],
    links: list[LayoutLink],
    width: float,
    height: float,
    transform: ZoomTransform = IDENTITY,
    tooltip: TooltipState | None = None,
) -> Scene:
    """
    Build the scene for the current positions.

    Links whose endpoints are not in ``nodes`` are skipped.
    """
    by_id = {node.id: node for node in nodes}

    region_shapes = tuple(
        RegionShape(
            cx=region.x,
            cy=region.y,
            r=region.radius,
            color=type_color(region.type),
            label=type_caption(region.type),
        )
        for region in regions
    )

    edge_shapes: list[EdgeShape] = []
    for link in links:
        source = by_id.get(link.source.id)
        target = by_id.get(link.target.id)
        if source is None or target is None:
            continue
        edge_shapes.append(
            EdgeShape(
                source_id=source.id,
                target_id=target.id,
                x1=source.x,
                y1=source.y,
                x2=target.x,
                y2=target.y,
                label=link.relationship_type,
            )
        )

    node_shapes = tuple(
        NodeShape(entity=node.entity, x=node.x, y=node.y, color=type_color(node.entity.type))
        for node in nodes
    )

    return Scene(
        width=width,
        height=height,
        transform=transform,
        regions=region_shapes,
        edges=tuple(edge_shapes),
        nodes=node_shapes,
        tooltip=tooltip,
    )
