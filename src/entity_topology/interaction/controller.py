"""Interaction controller for the topology view.

Pointer input is modelled as an explicit state machine:

    idle --press_node--> dragging(node) --release--> idle
    idle --press_background--> panning --release--> idle
    idle --wheel/pinch--> zooming --end_zoom--> idle
    zooming --press_node/press_background--> dragging(node) / panning

Wheel input has no end event, so a press ends any zoom in progress.

The zoom transform and hover tooltip are independent values owned here.
Node positions are only touched through the simulation's pin/unpin contract.
"""

import logging
from enum import Enum
from typing import Callable

from entity_topology.config import settings
from entity_topology.interaction.tooltip import TooltipState, build_tooltip
from entity_topology.interaction.zoom import IDENTITY, ZoomBehavior, ZoomTransform, wheel_delta
from entity_topology.simulation import ForceSimulation

logger = logging.getLogger(__name__)

ChangeListener = Callable[["InteractionController"], None]


class InteractionMode(str, Enum):
    """Pointer gesture currently in progress."""

    IDLE = "idle"
    DRAGGING = "dragging"
    PANNING = "panning"
    ZOOMING = "zooming"


# Which gesture events each mode accepts. Anything else is rejected.
TRANSITIONS: dict[InteractionMode, frozenset[str]] = {
    InteractionMode.IDLE: frozenset({"press_node", "press_background", "wheel", "pinch"}),
    InteractionMode.DRAGGING: frozenset({"move", "release"}),
    InteractionMode.PANNING: frozenset({"move", "release"}),
    InteractionMode.ZOOMING: frozenset(
        {"wheel", "pinch", "end_zoom", "press_node", "press_background"}
    ),
}


class InteractionController:
    """
    Maps pointer events onto pin/unpin requests, the zoom transform and the tooltip.

    Every gesture method returns True when the event was legal in the current
    mode and False when it was rejected (logged, no state change).
    """

    def __init__(
        self,
        simulation: ForceSimulation,
        width: float,
        height: float,
        zoom: ZoomBehavior | None = None,
        drag_alpha_target: float | None = None,
    ) -> None:
        self.simulation = simulation
        self.width = width
        self.height = height
        self.zoom = zoom or ZoomBehavior(width, height)
        self.drag_alpha_target = (
            drag_alpha_target if drag_alpha_target is not None else settings.drag_alpha_target
        )

        self.mode = InteractionMode.IDLE
        self.dragging_node_id: str | None = None
        self.transform: ZoomTransform = IDENTITY
        self.tooltip: TooltipState | None = None

        self._pan_anchor: tuple[float, float] | None = None
        self._listeners: list[ChangeListener] = []
        self._detached = False

    @property
    def detached(self) -> bool:
        return self._detached

    def on_change(self, listener: ChangeListener) -> None:
        """Register a callback for transform/tooltip changes."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _accept(self, event: str) -> bool:
        if self._detached:
            logger.debug(f"Ignoring {event}: controller detached")
            return False
        if event not in TRANSITIONS[self.mode]:
            logger.debug(f"Rejected {event} in mode {self.mode.value}")
            return False
        return True

    def to_layout(self, x: float, y: float) -> tuple[float, float]:
        """Convert a screen point into simulation coordinates."""
        return self.transform.invert((x, y))

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------

    def press_node(self, node_id: str, x: float, y: float) -> bool:
        """Start dragging a node: pin it under the pointer and reheat."""
        if not self._accept("press_node"):
            return False
        if node_id not in self.simulation.layout.nodes_by_id():
            logger.debug(f"Rejected press_node for unknown node {node_id}")
            return False
        layout_x, layout_y = self.to_layout(x, y)
        self.simulation.pin(node_id, layout_x, layout_y)
        self.simulation.reheat(self.drag_alpha_target)
        self.mode = InteractionMode.DRAGGING
        self.dragging_node_id = node_id
        logger.debug(f"Drag started on {node_id}")
        return True

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def press_background(self, x: float, y: float) -> bool:
        """Start panning from a screen point."""
        if not self._accept("press_background"):
            return False
        self._pan_anchor = self.to_layout(x, y)
        self.mode = InteractionMode.PANNING
        return True

    # ------------------------------------------------------------------
    # Shared move/release
    # ------------------------------------------------------------------

    def move(self, x: float, y: float) -> bool:
        """Pointer moved while dragging a node or panning."""
        if not self._accept("move"):
            return False
        if self.mode is InteractionMode.DRAGGING:
            layout_x, layout_y = self.to_layout(x, y)
            self.simulation.pin(self.dragging_node_id, layout_x, layout_y)
        else:
            self.transform = self.zoom.pan(self.transform, self._pan_anchor, (x, y))
            self._notify()
        return True

    def release(self) -> bool:
        """Pointer released: end the drag or pan."""
        if not self._accept("release"):
            return False
        if self.mode is InteractionMode.DRAGGING:
            self.simulation.unpin(self.dragging_node_id)
            self.simulation.set_alpha_target(0.0)
            logger.debug(f"Drag ended on {self.dragging_node_id}")
            self.dragging_node_id = None
        self._pan_anchor = None
        self.mode = InteractionMode.IDLE
        return True

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def wheel(
        self,
        x: float,
        y: float,
        delta_y: float,
        delta_mode: int = 0,
        ctrl_key: bool = False,
    ) -> bool:
        """Zoom about the pointer by a wheel delta."""
        if not self._accept("wheel"):
            return False
        factor = 2 ** wheel_delta(delta_y, delta_mode, ctrl_key)
        self.transform = self.zoom.scale_by(self.transform, factor, (x, y))
        self.mode = InteractionMode.ZOOMING
        self._notify()
        return True

    def pinch(self, x: float, y: float, factor: float) -> bool:
        """Zoom about a pinch centre by a relative factor."""
        if not self._accept("pinch"):
            return False
        self.transform = self.zoom.scale_by(self.transform, factor, (x, y))
        self.mode = InteractionMode.ZOOMING
        self._notify()
        return True

    def end_zoom(self) -> bool:
        if not self._accept("end_zoom"):
            return False
        self.mode = InteractionMode.IDLE
        return True

    def set_scale(self, k: float) -> ZoomTransform:
        """Programmatic zoom about the canvas centre. Legal in every mode."""
        if self._detached:
            return self.transform
        self.transform = self.zoom.scale_to(self.transform, k)
        self._notify()
        return self.transform

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------

    def hover(self, node_id: str, x: float, y: float) -> TooltipState | None:
        """Show (or move) the tooltip for the node under the pointer."""
        if self._detached:
            return None
        node = self.simulation.layout.nodes_by_id().get(node_id)
        if node is None:
            self.tooltip = None
        else:
            self.tooltip = build_tooltip(node.entity, x, y, self.width, self.height)
        self._notify()
        return self.tooltip

    def leave(self, node_id: str | None = None) -> None:
        """Clear the tooltip when the pointer leaves its node."""
        if self.tooltip is None:
            return
        if node_id is not None and self.tooltip.entity.id != node_id:
            return
        self.tooltip = None
        self._notify()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def detach(self) -> None:
        """Drop listeners and any gesture in progress; later events are rejected."""
        if self._detached:
            return
        if self.mode is InteractionMode.DRAGGING and self.dragging_node_id is not None:
            self.simulation.unpin(self.dragging_node_id)
        self.mode = InteractionMode.IDLE
        self.dragging_node_id = None
        self._pan_anchor = None
        self.tooltip = None
        self._listeners.clear()
        self._detached = True
