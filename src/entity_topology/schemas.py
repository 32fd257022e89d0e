"""Pydantic schemas for raw entity graph payloads."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from entity_topology.models import EntityEdge, EntityGraph, EntityReference, EntityType


class EntityReferenceSchema(BaseModel):
    """Raw entity reference as received from the data layer."""

    type: EntityType
    id: str = Field(min_length=1)
    name: str
    attributes: dict[str, Any] | None = None

    def to_entity(self) -> EntityReference:
        return EntityReference(
            type=self.type,
            id=self.id,
            name=self.name,
            attributes=dict(self.attributes or {}),
        )


class EntityEdgeSchema(BaseModel):
    """Raw relationship. Accepts ``relationshipType`` or ``relationship_type``."""

    model_config = ConfigDict(populate_by_name=True)

    source: EntityReferenceSchema
    target: EntityReferenceSchema
    relationship_type: str = Field(
        validation_alias=AliasChoices("relationshipType", "relationship_type"),
    )


class EntityGraphSchema(BaseModel):
    """Raw graph payload."""

    nodes: list[EntityReferenceSchema]
    edges: list[EntityEdgeSchema]

    def to_graph(self) -> EntityGraph:
        return EntityGraph(
            nodes=[node.to_entity() for node in self.nodes],
            edges=[
                EntityEdge(
                    source=edge.source.to_entity(),
                    target=edge.target.to_entity(),
                    relationship_type=edge.relationship_type,
                )
                for edge in self.edges
            ],
        )


class WrappedGraphSchema(BaseModel):
    """Graph nested under a ``graph`` key."""

    graph: EntityGraphSchema
