"""Force integrator for entity topology layouts.

Relaxes node positions one tick per frame under four forces:
1. charge    - pairwise repulsion
2. link      - springs along relationships
3. center    - keeps the graph on the canvas
4. cluster   - pulls nodes towards their entity-type anchor (x and y)

Energy (``alpha``) decays towards ``alpha_target`` each tick. Dragging
raises the target so neighbours make room; releasing lowers it again.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

import numpy as np

from entity_topology.config import settings
from entity_topology.layout import build_layout
from entity_topology.models import EntityGraph, LayoutNode, TopologyLayout
from entity_topology.simulation.forces import (
    CenterForce,
    Force,
    ForceState,
    LinkForce,
    ManyBodyForce,
    PositionForce,
)
from entity_topology.simulation.scheduler import FrameScheduler

logger = logging.getLogger(__name__)

TickListener = Callable[["ForceSimulation"], None]

ALPHA_DECAY_TICKS = 300


class ForceSimulation:
    """
    Iterative position solver owning every ``LayoutNode`` of one layout.

    The only sanctioned external mutation is ``pin``/``unpin``. Positions are
    computed on arrays and written back to the nodes in one pass at the end
    of a tick, so listeners never observe a half-updated layout.
    """

    def __init__(
        self,
        layout: TopologyLayout,
        scheduler: FrameScheduler,
        charge_strength: float | None = None,
        link_distance: float | None = None,
        cluster_strength: float | None = None,
        velocity_decay: float | None = None,
        alpha_min: float | None = None,
        seed: int | None = None,
    ) -> None:
        self.layout = layout
        self.nodes: list[LayoutNode] = layout.nodes
        self.scheduler = scheduler

        self.alpha = 1.0
        self.alpha_min = alpha_min if alpha_min is not None else settings.alpha_min
        self.alpha_decay = 1 - self.alpha_min ** (1 / ALPHA_DECAY_TICKS)
        self.alpha_target = 0.0
        self.velocity_decay = (
            velocity_decay if velocity_decay is not None else settings.velocity_decay
        )
        self.ticks = 0

        self._rng = np.random.default_rng(seed if seed is not None else settings.jiggle_seed)
        self._nodes_by_id = {node.id: node for node in self.nodes}
        self._listeners: list[TickListener] = []
        self._frame: int | None = None
        self._running = False
        self._stopped = False

        center_x, center_y = layout.center
        cluster = cluster_strength if cluster_strength is not None else settings.cluster_strength
        charge = charge_strength if charge_strength is not None else settings.charge_strength
        distance = link_distance if link_distance is not None else settings.link_distance
        self.forces: dict[str, Force] = {
            "charge": ManyBodyForce(strength=charge),
            "link": LinkForce(layout.links, distance=distance),
            "center": CenterForce(center_x, center_y),
            "cluster-x": PositionForce(axis=0, strength=cluster),
            "cluster-y": PositionForce(axis=1, strength=cluster),
        }
        for force in self.forces.values():
            force.initialize(self.nodes)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running and not self._stopped

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def settled(self) -> bool:
        """True once energy has decayed below ``alpha_min`` with nothing reheating it."""
        return self.alpha < self.alpha_min and self.alpha_target < self.alpha_min

    @property
    def frame_pending(self) -> bool:
        return self._frame is not None

    def positions(self) -> dict[str, tuple[float, float]]:
        """Snapshot of every node position keyed by entity id."""
        return {node.id: (node.x, node.y) for node in self.nodes}

    def on_tick(self, listener: TickListener) -> None:
        """Register a callback run after every scheduled tick."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self, iterations: int = 1) -> None:
        """Advance the simulation synchronously without notifying listeners."""
        if self._stopped:
            return
        for _ in range(iterations):
            self._step()

    def _step(self) -> None:
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
        self.ticks += 1
        if not self.nodes:
            return

        state = ForceState(
            pos=np.array([[node.x, node.y] for node in self.nodes], dtype=float),
            vel=np.array([[node.vx, node.vy] for node in self.nodes], dtype=float),
            rng=self._rng,
        )
        for force in self.forces.values():
            force.apply(state, self.alpha)

        pinned = np.array([node.pinned for node in self.nodes], dtype=bool)
        free = ~pinned
        state.vel[free] *= 1 - self.velocity_decay
        state.pos[free] += state.vel[free]

        for i, node in enumerate(self.nodes):
            if node.pinned:
                node.x, node.y = node.fx, node.fy
                node.vx = node.vy = 0.0
            else:
                node.x, node.y = float(state.pos[i, 0]), float(state.pos[i, 1])
                node.vx, node.vy = float(state.vel[i, 0]), float(state.vel[i, 1])

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def start(self) -> "ForceSimulation":
        """Begin ticking once per frame."""
        if self._stopped:
            logger.debug("Ignoring start() on a stopped simulation")
            return self
        self._running = True
        self._schedule()
        return self

    def restart(self) -> None:
        """Resume the frame loop (e.g. after a reheat)."""
        self.start()

    def request_tick(self) -> bool:
        """Ask for a tick on the next frame.

        Returns:
            False when a frame is already pending and the request was coalesced
        """
        if not self.running:
            return False
        return self._schedule()

    def _schedule(self) -> bool:
        if self._frame is not None:
            logger.debug("Tick already pending, coalescing request")
            return False
        self._frame = self.scheduler.request_frame(self._on_frame)
        return True

    def _on_frame(self) -> None:
        self._frame = None
        if not self.running:
            return

        if not self.settled:
            self._step()
            for listener in list(self._listeners):
                listener(self)

        # A listener may have stopped the simulation
        if self.running:
            self._schedule()

    # ------------------------------------------------------------------
    # Pinning and energy
    # ------------------------------------------------------------------

    def pin(self, node_id: str, x: float, y: float) -> None:
        """Fix a node at ``(x, y)`` until ``unpin`` is called."""
        if self._stopped:
            return
        node = self._nodes_by_id.get(node_id)
        if node is None:
            raise ValueError(f"Unknown node id: {node_id}")
        node.fx, node.fy = x, y
        node.x, node.y = x, y
        node.vx = node.vy = 0.0

    def unpin(self, node_id: str) -> None:
        """Release a pinned node back to free relaxation."""
        node = self._nodes_by_id.get(node_id)
        if node is None:
            return
        node.fx = node.fy = None

    def set_alpha_target(self, target: float) -> None:
        self.alpha_target = target

    def reheat(self, target: float | None = None) -> None:
        """Raise the energy target and make sure the loop is ticking."""
        self.alpha_target = target if target is not None else settings.drag_alpha_target
        self.restart()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Cancel any pending frame and release forces and listeners. Idempotent."""
        if self._stopped:
            return
        self._stopped = True
        self._running = False
        if self._frame is not None:
            self.scheduler.cancel_frame(self._frame)
            self._frame = None
        self.forces.clear()
        self._listeners.clear()
        logger.info(f"Stopped simulation after {self.ticks} ticks ({len(self.nodes)} nodes)")


@dataclass
class SimulationHandle:
    """Running simulation together with the layout it owns."""

    layout: TopologyLayout
    simulation: ForceSimulation

    @property
    def active(self) -> bool:
        return self.simulation.running


def start_simulation(
    graph: EntityGraph,
    width: float,
    height: float,
    scheduler: FrameScheduler,
    **options,
) -> SimulationHandle:
    """Build a layout for ``graph`` and start its simulation loop.

    Args:
        graph: Input entity graph
        width: Canvas width
        height: Canvas height
        scheduler: Frame scheduler driving the loop
        **options: Overrides passed to ``ForceSimulation``

    Returns:
        Handle that must be passed to ``stop_simulation`` on every teardown path
    """
    layout = build_layout(graph, width, height)
    simulation = ForceSimulation(layout, scheduler, **options).start()
    logger.info(
        f"Started simulation: {len(layout.nodes)} nodes, {len(layout.links)} links, "
        f"{len(layout.regions)} clusters"
    )
    return SimulationHandle(layout=layout, simulation=simulation)


def stop_simulation(handle: SimulationHandle) -> None:
    """Stop the simulation behind ``handle``."""
    handle.simulation.stop()


@contextmanager
def simulation_scope(
    graph: EntityGraph,
    width: float,
    height: float,
    scheduler: FrameScheduler,
    **options,
) -> Iterator[SimulationHandle]:
    """Run a simulation for the duration of a ``with`` block."""
    handle = start_simulation(graph, width, height, scheduler, **options)
    try:
        yield handle
    finally:
        stop_simulation(handle)
