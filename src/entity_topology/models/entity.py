"""Entity graph models - typed security entities and their relationships."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EntityType(str, Enum):
    """Closed set of security domain categories."""

    # Governance
    CONTROL = "control"
    RISK = "risk"
    FRAMEWORK = "framework"
    POLICY = "policy"
    STANDARD = "standard"
    FINDING = "finding"

    # Core
    METRIC = "metric"
    VENDOR = "vendor"
    ASSET = "asset"
    PERSON = "person"
    TEAM = "team"
    PROCESS = "process"

    # Vulnerability management
    VULNERABILITY = "vulnerability"
    CVE = "cve"
    PATCH = "patch"
    EXPLOIT = "exploit"
    AFFECTED_ASSET = "affected_asset"
    SCAN = "scan"
    SLA_POLICY = "sla_policy"
    REMEDIATION_GROUP = "remediation_group"

    # Disaster recovery / business continuity
    RECOVERY_PLAN = "recovery_plan"
    RTO_RPO_TARGET = "rto_rpo_target"
    BC_SCENARIO = "bc_scenario"
    TEST_EXERCISE = "test_exercise"
    DEPENDENCY = "dependency"
    CRITICAL_PROCESS = "critical_process"
    RECOVERY_TEAM = "recovery_team"
    ALTERNATE_SITE = "alternate_site"
    COMMUNICATION_PLAN = "communication_plan"
    ESCALATION_TIER = "escalation_tier"
    VITAL_RECORD = "vital_record"
    CRISIS_ACTION = "crisis_action"


@dataclass(frozen=True)
class EntityReference:
    """
    A typed, identified domain object participating in a graph.

    Identity is ``(type, id)``: name and attributes do not take part in
    equality or hashing.
    """

    type: EntityType
    id: str
    name: str = field(compare=False)
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def key(self) -> tuple[EntityType, str]:
        """Identity tuple of this entity."""
        return (self.type, self.id)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "type": self.type.value,
            "id": self.id,
            "name": self.name,
        }
        if self.attributes:
            data["attributes"] = dict(self.attributes)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "EntityReference":
        """Create from dictionary. Raises ValueError on an unknown type."""
        return cls(
            type=EntityType(data["type"]),
            id=str(data["id"]),
            name=data.get("name", ""),
            attributes=dict(data.get("attributes") or {}),
        )


@dataclass(frozen=True)
class EntityEdge:
    """Directed, typed relationship between two entities."""

    source: EntityReference
    target: EntityReference
    relationship_type: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "source": self.source.to_dict(),
            "target": self.target.to_dict(),
            "relationship_type": self.relationship_type,
        }


@dataclass(frozen=True)
class EntityGraph:
    """Immutable graph value as supplied by the data layer."""

    nodes: tuple[EntityReference, ...] = ()
    edges: tuple[EntityEdge, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    @property
    def node_ids(self) -> set[str]:
        """Distinct node ids present in the graph."""
        return {node.id for node in self.nodes}

    def valid_edges(self) -> list[EntityEdge]:
        """Edges whose source and target ids are both present among nodes.

        Dangling edges are dropped silently, preserving the original order
        of the remaining edges.
        """
        node_ids = self.node_ids
        valid = [
            edge
            for edge in self.edges
            if edge.source.id in node_ids and edge.target.id in node_ids
        ]
        dropped = len(self.edges) - len(valid)
        if dropped:
            logger.debug(f"Dropped {dropped} dangling edge(s) from graph")
        return valid

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
