"""Entity topology view - rendering mode selection and lifecycle.

Ties the planner, integrator, interaction controller and renderers together
for one graph at a time. Swapping the graph tears everything down and builds
it again from scratch; pins, zoom and tooltip do not survive a swap.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from entity_topology.config import settings
from entity_topology.interaction import InteractionController
from entity_topology.layout import build_layout
from entity_topology.models import EntityGraph, EntityReference
from entity_topology.render import RelationshipMatrix, Scene, build_relationship_matrix, render_scene
from entity_topology.simulation import (
    FrameScheduler,
    ManualFrameScheduler,
    SimulationHandle,
    start_simulation,
    stop_simulation,
)

logger = logging.getLogger(__name__)

EMPTY_TOPOLOGY_MESSAGE = "No entities available for topology."

NodeClickHandler = Callable[[EntityReference], None]
RenderListener = Callable[["RenderOutput"], None]


class RenderMode(str, Enum):
    """How a graph is presented."""

    SPATIAL = "spatial"
    MATRIX = "matrix"


@dataclass(frozen=True)
class EmptyState:
    """Placeholder shown instead of a scene for a graph without nodes."""

    message: str = EMPTY_TOPOLOGY_MESSAGE

    def to_html(self) -> str:
        return (
            '<div class="cei-entity-topology" data-testid="entity-topology-empty">'
            f'<p class="cei-entity-topology-empty">{self.message}</p></div>'
        )


RenderOutput = Scene | RelationshipMatrix | EmptyState


def select_render_mode(graph: EntityGraph, threshold: int | None = None) -> RenderMode:
    """Matrix above the node-count threshold, spatial otherwise (including empty)."""
    limit = threshold if threshold is not None else settings.matrix_threshold
    return RenderMode.MATRIX if len(graph.nodes) > limit else RenderMode.SPATIAL


class EntityTopologyView:
    """
    Owns the simulation and interaction state for the current graph.

    Use as a context manager (or call ``mount``/``unmount``) so the simulation
    is stopped on every exit path.
    """

    def __init__(
        self,
        graph: EntityGraph,
        width: float | None = None,
        height: float | None = None,
        on_node_click: NodeClickHandler | None = None,
        scheduler: FrameScheduler | None = None,
        matrix_threshold: int | None = None,
        **simulation_options,
    ) -> None:
        self.graph = graph
        self.width = width if width is not None else settings.default_width
        self.height = height if height is not None else settings.default_height
        self.on_node_click = on_node_click
        self.scheduler = scheduler or ManualFrameScheduler()
        self.matrix_threshold = matrix_threshold
        self.simulation_options = simulation_options

        self.mode = select_render_mode(graph, matrix_threshold)
        self.handle: SimulationHandle | None = None
        self.controller: InteractionController | None = None
        self.matrix: RelationshipMatrix | None = None
        self.frames_rendered = 0

        self._render_listeners: list[RenderListener] = []
        self._mounted = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def mounted(self) -> bool:
        return self._mounted

    def __enter__(self) -> "EntityTopologyView":
        return self.mount()

    def __exit__(self, *exc_info) -> None:
        self.unmount()

    def mount(self) -> "EntityTopologyView":
        """Build the presentation for the current graph."""
        if self._mounted:
            return self
        self._build()
        self._mounted = True
        return self

    def unmount(self) -> None:
        """Stop the simulation and detach interaction handlers."""
        self._teardown()
        self._mounted = False

    def set_graph(self, graph: EntityGraph) -> None:
        """Replace the graph. The same graph object is a no-op."""
        if graph is self.graph:
            return
        self._teardown()
        self.graph = graph
        self.mode = select_render_mode(graph, self.matrix_threshold)
        if self._mounted:
            self._build()

    def resize(self, width: float, height: float) -> None:
        """Change canvas dimensions, rebuilding the layout."""
        if (width, height) == (self.width, self.height):
            return
        self._teardown()
        self.width, self.height = width, height
        if self._mounted:
            self._build()

    def _build(self) -> None:
        logger.info(f"Rendering {len(self.graph.nodes)} nodes in {self.mode.value} mode")
        if self.mode is RenderMode.MATRIX:
            self.matrix = build_relationship_matrix(self.graph, self._emit_click)
            return
        if not self.graph.nodes:
            return

        self.handle = start_simulation(
            self.graph,
            self.width,
            self.height,
            self.scheduler,
            **self.simulation_options,
        )
        self.controller = InteractionController(self.handle.simulation, self.width, self.height)
        self.handle.simulation.on_tick(lambda _: self._publish())
        self.controller.on_change(lambda _: self._publish())

    def _teardown(self) -> None:
        if self.controller is not None:
            self.controller.detach()
            self.controller = None
        if self.handle is not None:
            stop_simulation(self.handle)
            self.handle = None
        self.matrix = None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def on_render(self, listener: RenderListener) -> None:
        """Register a callback receiving every new frame's output."""
        self._render_listeners.append(listener)

    def _publish(self) -> None:
        output = self.render()
        self.frames_rendered += 1
        for listener in list(self._render_listeners):
            listener(output)

    def render(self) -> RenderOutput:
        """Current visual output for the graph."""
        if self.mode is RenderMode.MATRIX:
            if self.matrix is None:
                self.matrix = build_relationship_matrix(self.graph, self._emit_click)
            return self.matrix
        if self.handle is None:
            if self.graph.nodes:
                # Not mounted yet: draw the seeded layout without simulating
                layout = build_layout(self.graph, self.width, self.height)
                return render_scene(
                    layout.nodes, layout.regions, layout.links, self.width, self.height
                )
            return EmptyState()

        layout = self.handle.layout
        return render_scene(
            layout.nodes,
            layout.regions,
            layout.links,
            self.width,
            self.height,
            transform=self.controller.transform,
            tooltip=self.controller.tooltip,
        )

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------

    def _emit_click(self, entity: EntityReference) -> None:
        if self.on_node_click is not None:
            self.on_node_click(entity)

    def click_node(self, node_id: str) -> EntityReference | None:
        """Activate a node by id, forwarding its entity to ``on_node_click``."""
        for entity in self.graph.nodes:
            if entity.id == node_id:
                self._emit_click(entity)
                return entity
        logger.debug(f"Click on unknown node {node_id}")
        return None


def render_snapshot(
    graph: EntityGraph,
    width: float | None = None,
    height: float | None = None,
    ticks: int | None = None,
) -> RenderOutput:
    """One-shot render: settle the layout for ``ticks`` ticks, then draw it."""
    with EntityTopologyView(graph, width, height) as view:
        if view.handle is not None:
            view.handle.simulation.tick(ticks if ticks is not None else settings.settle_ticks)
        return view.render()


def to_markup(output: RenderOutput) -> str:
    """SVG for a scene, HTML for the matrix or empty state."""
    if isinstance(output, Scene):
        return output.to_svg()
    return output.to_html()
