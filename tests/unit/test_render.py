"""Unit tests for the scene renderer and relationship matrix."""

import pytest

from entity_topology.interaction import ZoomTransform, build_tooltip
from entity_topology.layout import build_layout
from entity_topology.models import EntityEdge, EntityGraph, EntityReference, EntityType
from entity_topology.render import EMPTY_MATRIX_MESSAGE, build_relationship_matrix, render_scene
from entity_topology.render.matrix import MATRIX_HEADERS


def scene_for(graph: EntityGraph, **kwargs):
    layout = build_layout(graph, 400, 300)
    return render_scene(layout.nodes, layout.regions, layout.links, 400, 300, **kwargs)


class TestRenderScene:
    """Tests for building scene primitives."""

    def test_counts(self, simple_graph: EntityGraph) -> None:
        """Test one region per type, one edge per link and one node per entity."""
        scene = scene_for(simple_graph)
        assert len(scene.regions) == 2
        assert len(scene.edges) == 1
        assert len(scene.nodes) == 2

    def test_region_shape(self, simple_graph: EntityGraph) -> None:
        """Test regions are labelled with the type and sized by membership."""
        region = scene_for(simple_graph).regions[0]
        assert region.label == "risk"
        assert region.r == 72
        assert region.color == "var(--warning)"
        assert region.label_position == (region.cx, region.cy - 70)

    def test_edge_follows_nodes(self, simple_graph: EntityGraph) -> None:
        """Test edge endpoints are the current node positions."""
        scene = scene_for(simple_graph)
        edge = scene.edges[0]
        source, target = scene.nodes
        assert (edge.x1, edge.y1) == (source.x, source.y)
        assert (edge.x2, edge.y2) == (target.x, target.y)
        assert edge.label == "mitigated_by"
        assert edge.label_position == ((edge.x1 + edge.x2) / 2, (edge.y1 + edge.y2) / 2 - 4)

    def test_node_shape(self, simple_graph: EntityGraph) -> None:
        """Test node radius, colour and label placement."""
        node = scene_for(simple_graph).nodes[1]
        assert node.r == 11
        assert node.id == "control-1"
        assert node.label == "Control 1"
        assert node.color == "var(--accent)"
        assert node.label_position == (node.x + 15, node.y + 4)

    def test_skips_unresolved_links(self, simple_graph: EntityGraph) -> None:
        """Test links whose endpoints are missing are not drawn."""
        layout = build_layout(simple_graph, 400, 300)
        scene = render_scene(layout.nodes[:1], layout.regions, layout.links, 400, 300)
        assert scene.edges == ()
        assert len(scene.nodes) == 1

    def test_dangling_edges_not_drawn(self, risk: EntityReference) -> None:
        """Test an edge to an entity outside the node list is dropped."""
        ghost = EntityReference(type=EntityType.ASSET, id="ghost", name="Ghost")
        graph = EntityGraph(
            nodes=[risk],
            edges=[EntityEdge(source=risk, target=ghost, relationship_type="affects")],
        )
        assert scene_for(graph).edges == ()


class TestSceneSvg:
    """Tests for SVG serialisation."""

    def test_document(self, simple_graph: EntityGraph) -> None:
        """Test svg root attributes and test ids."""
        svg = scene_for(simple_graph).to_svg()
        assert svg.startswith("<svg")
        assert 'role="img"' in svg
        assert 'width="400" height="300" viewBox="0 0 400 300"' in svg
        assert svg.count('data-testid="entity-topology-node"') == 2
        assert svg.count('data-testid="entity-topology-edge"') == 1
        assert svg.count('data-node-circle="true"') == 2
        assert 'data-entity-id="risk-1"' in svg
        assert ">mitigated_by<" in svg
        assert svg.endswith("</svg>")

    def test_transform(self, simple_graph: EntityGraph) -> None:
        """Test the zoom transform wraps the drawn content."""
        svg = scene_for(simple_graph, transform=ZoomTransform(2, -200, -150)).to_svg()
        assert 'transform="translate(-200, -150) scale(2)"' in svg

    def test_escapes_text(self) -> None:
        """Test entity names are HTML escaped."""
        entity = EntityReference(type=EntityType.VENDOR, id="v<1>", name="A & <B>")
        svg = scene_for(EntityGraph(nodes=[entity])).to_svg()
        assert "A &amp; &lt;B&gt;" in svg
        assert 'data-entity-id="v&lt;1&gt;"' in svg
        assert "<B>" not in svg

    def test_tooltip(self, simple_graph: EntityGraph, risk: EntityReference) -> None:
        """Test the tooltip is drawn outside the zoomed group."""
        tooltip = build_tooltip(risk, 100, 100, 400, 300)
        svg = scene_for(simple_graph, tooltip=tooltip).to_svg()
        assert 'role="status"' in svg
        assert 'transform="translate(114, 86)"' in svg
        assert 'font-weight="bold">Risk 1<' in svg
        assert ">owner: Security<" in svg

    def test_no_tooltip(self, simple_graph: EntityGraph) -> None:
        assert 'role="status"' not in scene_for(simple_graph).to_svg()


class TestRelationshipMatrix:
    """Tests for the relationship matrix."""

    def test_sorted_by_relationship(self, matrix_graph: EntityGraph) -> None:
        """Test rows are ordered ascending by relationship type."""
        matrix = build_relationship_matrix(matrix_graph)
        assert [row.relationship_type for row in matrix.rows] == [
            "correlates_with",
            "depends_on",
            "mitigated_by",
        ]
        assert matrix.rows[0].source.id == "risk-b"
        assert matrix.rows[0].target.id == "risk-a"

    def test_stable_order(self) -> None:
        """Test edges sharing a type keep their input order."""
        nodes = [
            EntityReference(type=EntityType.ASSET, id=f"a{i}", name=f"A{i}") for i in range(4)
        ]
        edges = [
            EntityEdge(source=nodes[3], target=nodes[0], relationship_type="hosts"),
            EntityEdge(source=nodes[1], target=nodes[2], relationship_type="connects_to"),
            EntityEdge(source=nodes[0], target=nodes[1], relationship_type="hosts"),
            EntityEdge(source=nodes[2], target=nodes[3], relationship_type="hosts"),
        ]
        matrix = build_relationship_matrix(EntityGraph(nodes=nodes, edges=edges))
        assert [(row.source.id, row.target.id) for row in matrix.rows] == [
            ("a1", "a2"),
            ("a3", "a0"),
            ("a0", "a1"),
            ("a2", "a3"),
        ]

    def test_excludes_dangling_edges(self, risk: EntityReference) -> None:
        ghost = EntityReference(type=EntityType.ASSET, id="ghost", name="Ghost")
        graph = EntityGraph(
            nodes=[risk],
            edges=[EntityEdge(source=risk, target=ghost, relationship_type="affects")],
        )
        assert build_relationship_matrix(graph).empty

    def test_activate_forwards_entity(self, matrix_graph: EntityGraph) -> None:
        """Test clicking either side calls the handler with that entity."""
        clicked: list[str] = []
        matrix = build_relationship_matrix(matrix_graph, lambda entity: clicked.append(entity.id))
        assert matrix.activate(0, "source").id == "risk-b"
        matrix.activate(2, "target")
        assert clicked == ["risk-b", "control-1"]

    def test_activate_without_handler(self, matrix_graph: EntityGraph) -> None:
        matrix = build_relationship_matrix(matrix_graph)
        assert matrix.activate(1, "target").id == "risk-b"

    def test_html(self, matrix_graph: EntityGraph) -> None:
        """Test the table has headers and one row per edge."""
        html = build_relationship_matrix(matrix_graph).to_html()
        for header in MATRIX_HEADERS:
            assert f">{header}<" in html
        assert html.count("<tr data-row=") == 3
        assert html.count('class="cei-entity-matrix-btn"') == 6
        assert 'data-testid="entity-relationship-matrix"' in html

    def test_empty_html(self) -> None:
        """Test a graph without edges shows the empty message."""
        matrix = build_relationship_matrix(EntityGraph())
        assert matrix.empty
        assert EMPTY_MATRIX_MESSAGE in matrix.to_html()
        assert "<table>" not in matrix.to_html()

    @pytest.mark.parametrize("side", ["source", "target"])
    def test_activate_out_of_range(self, matrix_graph: EntityGraph, side: str) -> None:
        matrix = build_relationship_matrix(matrix_graph)
        with pytest.raises(IndexError):
            matrix.activate(10, side)
