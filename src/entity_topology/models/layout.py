"""Derived layout state - simulation nodes, links and cluster regions."""

from dataclasses import dataclass, field

from entity_topology.models.entity import EntityReference, EntityType


@dataclass
class LayoutNode:
    """
    Mutable simulation node, one per distinct entity id.

    Positions and velocities belong to the force integrator. ``fx``/``fy``
    hold the pinned position while the node is dragged.
    """

    entity: EntityReference
    index: int
    x: float
    y: float
    cluster_x: float
    cluster_y: float
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def id(self) -> str:
        return self.entity.id

    @property
    def pinned(self) -> bool:
        return self.fx is not None and self.fy is not None


@dataclass
class LayoutLink:
    """Resolved edge between two layout nodes."""

    source: LayoutNode
    target: LayoutNode
    relationship_type: str


@dataclass(frozen=True)
class ClusterRegion:
    """Visual grouping of all nodes that share an entity type."""

    type: EntityType
    x: float
    y: float
    member_count: int

    @property
    def radius(self) -> float:
        return 64 + 8 * self.member_count


@dataclass
class TopologyLayout:
    """Output of the cluster layout planner for one graph instance."""

    width: float
    height: float
    nodes: list[LayoutNode] = field(default_factory=list)
    links: list[LayoutLink] = field(default_factory=list)
    regions: list[ClusterRegion] = field(default_factory=list)

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def nodes_by_id(self) -> dict[str, LayoutNode]:
        return {node.id: node for node in self.nodes}
