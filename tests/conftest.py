"""Pytest configuration and fixtures."""

import pytest

from entity_topology.config import Settings, get_test_settings
from entity_topology.models import EntityEdge, EntityGraph, EntityReference, EntityType
from entity_topology.simulation import ManualFrameScheduler


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return get_test_settings()


@pytest.fixture
def risk() -> EntityReference:
    return EntityReference(
        type=EntityType.RISK,
        id="risk-1",
        name="Risk 1",
        attributes={"owner": "Security", "score": 92},
    )


@pytest.fixture
def control() -> EntityReference:
    return EntityReference(type=EntityType.CONTROL, id="control-1", name="Control 1")


@pytest.fixture
def simple_graph(risk: EntityReference, control: EntityReference) -> EntityGraph:
    """One risk mitigated by one control."""
    return EntityGraph(
        nodes=[risk, control],
        edges=[EntityEdge(source=risk, target=control, relationship_type="mitigated_by")],
    )


@pytest.fixture
def matrix_graph() -> EntityGraph:
    """Three entities with three differently typed relationships."""
    risk_a = EntityReference(type=EntityType.RISK, id="risk-a", name="Risk A")
    risk_b = EntityReference(type=EntityType.RISK, id="risk-b", name="Risk B")
    control = EntityReference(type=EntityType.CONTROL, id="control-1", name="Control 1")
    return EntityGraph(
        nodes=[risk_a, risk_b, control],
        edges=[
            EntityEdge(source=risk_a, target=control, relationship_type="mitigated_by"),
            EntityEdge(source=risk_b, target=risk_a, relationship_type="correlates_with"),
            EntityEdge(source=control, target=risk_b, relationship_type="depends_on"),
        ],
    )


def make_large_graph(node_count: int = 51) -> EntityGraph:
    """Graph of ``node_count`` assets chained by alternating relationship types."""
    nodes = [
        EntityReference(type=EntityType.ASSET, id=f"asset-{i}", name=f"Asset {i}")
        for i in range(node_count)
    ]
    relationship_types = ["hosts", "depends_on", "connects_to"]
    edges = [
        EntityEdge(
            source=nodes[i],
            target=nodes[i + 1],
            relationship_type=relationship_types[i % len(relationship_types)],
        )
        for i in range(node_count - 1)
    ]
    return EntityGraph(nodes=nodes, edges=edges)


@pytest.fixture
def large_graph() -> EntityGraph:
    return make_large_graph(51)


@pytest.fixture
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler()


@pytest.fixture
def graph_payload() -> dict:
    """Raw graph payload as produced by the data layer."""
    risk = {
        "type": "risk",
        "id": "risk-1",
        "name": "Risk 1",
        "attributes": {"owner": "Security", "score": 92},
    }
    control = {"type": "control", "id": "control-1", "name": "Control 1"}
    return {
        "nodes": [risk, control],
        "edges": [{"source": risk, "target": control, "relationshipType": "mitigated_by"}],
    }


@pytest.fixture
def graph_of_size():
    """Factory for chained asset graphs of a given size."""
    return make_large_graph
