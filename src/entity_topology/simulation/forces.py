"""Force definitions for the topology simulation.

Each force reads positions and adds to velocities on a shared ``ForceState``
(the center force translates positions directly). Formulas follow the
classic velocity-Verlet force model used by browser graph libraries.
"""

import math
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from entity_topology.models import LayoutLink, LayoutNode

JIGGLE_SCALE = 1e-6


@dataclass
class ForceState:
    """Positions and velocities of all nodes for one tick, shape ``(n, 2)``."""

    pos: np.ndarray
    vel: np.ndarray
    rng: np.random.Generator

    @property
    def size(self) -> int:
        return len(self.pos)

    def jiggle(self) -> float:
        """Tiny random offset used to separate coincident points."""
        return (self.rng.random() - 0.5) * JIGGLE_SCALE


class Force(Protocol):
    def initialize(self, nodes: list[LayoutNode]) -> None: ...

    def apply(self, state: ForceState, alpha: float) -> None: ...


class ManyBodyForce:
    """Pairwise charge between every two nodes. Negative strength repels."""

    def __init__(self, strength: float = -300.0, distance_min: float = 1.0) -> None:
        self.strength = strength
        self.distance_min2 = distance_min * distance_min

    def initialize(self, nodes: list[LayoutNode]) -> None:
        pass

    def apply(self, state: ForceState, alpha: float) -> None:
        n = state.size
        if n < 2:
            return

        # delta[i, j] = pos[j] - pos[i]
        delta = state.pos[np.newaxis, :, :] - state.pos[:, np.newaxis, :]
        off_diagonal = ~np.eye(n, dtype=bool)
        for axis in (0, 1):
            coincident = (delta[:, :, axis] == 0) & off_diagonal
            if coincident.any():
                jitter = (state.rng.random(int(coincident.sum())) - 0.5) * JIGGLE_SCALE
                delta[:, :, axis][coincident] = jitter

        dist2 = np.sum(delta * delta, axis=2)
        dist2 = np.where(dist2 < self.distance_min2, np.sqrt(self.distance_min2 * dist2), dist2)
        np.fill_diagonal(dist2, np.inf)
        weight = self.strength * alpha / dist2
        state.vel += np.sum(delta * weight[:, :, np.newaxis], axis=1)


class LinkForce:
    """Spring along every link towards a target separation distance."""

    def __init__(self, links: list[LayoutLink], distance: float = 100.0) -> None:
        self.links = links
        self.distance = distance
        self._pairs: list[tuple[int, int]] = []
        self._strengths: list[float] = []
        self._biases: list[float] = []

    def initialize(self, nodes: list[LayoutNode]) -> None:
        position = {id(node): i for i, node in enumerate(nodes)}
        degree = [0] * len(nodes)
        self._pairs = []
        for link in self.links:
            s = position[id(link.source)]
            t = position[id(link.target)]
            degree[s] += 1
            degree[t] += 1
            self._pairs.append((s, t))

        self._strengths = [1 / min(degree[s], degree[t]) for s, t in self._pairs]
        self._biases = [degree[s] / (degree[s] + degree[t]) for s, t in self._pairs]

    def apply(self, state: ForceState, alpha: float) -> None:
        pos, vel = state.pos, state.vel
        for (s, t), strength, bias in zip(self._pairs, self._strengths, self._biases):
            x = pos[t, 0] + vel[t, 0] - pos[s, 0] - vel[s, 0] or state.jiggle()
            y = pos[t, 1] + vel[t, 1] - pos[s, 1] - vel[s, 1] or state.jiggle()
            length = math.sqrt(x * x + y * y)
            scale = (length - self.distance) / length * alpha * strength
            x *= scale
            y *= scale
            vel[t, 0] -= x * bias
            vel[t, 1] -= y * bias
            vel[s, 0] += x * (1 - bias)
            vel[s, 1] += y * (1 - bias)


class CenterForce:
    """Translate the whole system so its mean position sits on the centre."""

    def __init__(self, x: float, y: float, strength: float = 1.0) -> None:
        self.center = np.array([x, y], dtype=float)
        self.strength = strength

    def initialize(self, nodes: list[LayoutNode]) -> None:
        pass

    def apply(self, state: ForceState, alpha: float) -> None:
        if state.size == 0:
            return
        shift = (state.pos.mean(axis=0) - self.center) * self.strength
        state.pos -= shift


class PositionForce:
    """Pull each node towards a per-node target on one axis."""

    def __init__(self, axis: int, strength: float = 0.1) -> None:
        if axis not in (0, 1):
            raise ValueError(f"axis must be 0 (x) or 1 (y), got {axis}")
        self.axis = axis
        self.strength = strength
        self._targets = np.zeros(0)

    def initialize(self, nodes: list[LayoutNode]) -> None:
        if self.axis == 0:
            self._targets = np.array([node.cluster_x for node in nodes], dtype=float)
        else:
            self._targets = np.array([node.cluster_y for node in nodes], dtype=float)

    def apply(self, state: ForceState, alpha: float) -> None:
        if state.size == 0:
            return
        column = state.pos[:, self.axis]
        state.vel[:, self.axis] += (self._targets - column) * self.strength * alpha
