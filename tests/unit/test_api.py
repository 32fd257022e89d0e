"""Unit tests for API endpoints."""

import inspect

import pytest
from fastapi.testclient import TestClient

from entity_topology.api.main import create_app
from entity_topology.api.routes import (
    HealthResponse,
    RenderRequest,
    RenderResponse,
    render_topology,
)


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


class TestModels:
    """Tests for request/response models."""

    def test_render_request_defaults(self, graph_payload: dict) -> None:
        """Test size and tick overrides default to None."""
        request = RenderRequest(graph=graph_payload)
        assert request.width is None
        assert request.height is None
        assert request.ticks is None
        assert len(request.graph.nodes) == 2

    def test_render_response(self) -> None:
        response = RenderResponse(
            mode="empty", content="", node_count=0, edge_count=0, rendered_edge_count=0
        )
        assert response.mode == "empty"

    def test_health_response(self) -> None:
        assert HealthResponse().status == "ok"


class TestHealthEndpoint:
    """Tests for /health."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestEntityTypesEndpoint:
    """Tests for /topology/entity-types."""

    def test_lists_all_types(self, client: TestClient) -> None:
        """Test the full type table is returned."""
        response = client.get("/topology/entity-types")
        assert response.status_code == 200
        types = {item["type"]: item for item in response.json()}
        assert len(types) == 32
        assert types["risk"]["color"] == "--warning"
        assert types["affected_asset"]["label"] == "Affected Asset"


class TestRenderEndpoint:
    """Tests for /topology/render."""

    def test_spatial(self, client: TestClient, graph_payload: dict) -> None:
        """Test a small graph renders as SVG."""
        response = client.post(
            "/topology/render", json={"graph": graph_payload, "width": 500, "height": 400}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "spatial"
        assert data["node_count"] == 2
        assert data["edge_count"] == 1
        assert data["rendered_edge_count"] == 1
        assert data["content"].startswith("<svg")
        assert 'viewBox="0 0 500 400"' in data["content"]

    def test_runs_in_threadpool(self) -> None:
        """Test the CPU-bound render handler is a plain function."""
        assert not inspect.iscoroutinefunction(render_topology)

    def test_empty(self, client: TestClient) -> None:
        response = client.post("/topology/render", json={"graph": {"nodes": [], "edges": []}})
        data = response.json()
        assert data["mode"] == "empty"
        assert "No entities available for topology." in data["content"]

    def test_matrix(self, client: TestClient, large_graph) -> None:
        """Test more than 50 nodes renders the relationship table."""
        response = client.post("/topology/render", json={"graph": large_graph.to_dict()})
        data = response.json()
        assert data["mode"] == "matrix"
        assert data["rendered_edge_count"] == 50
        assert "<table>" in data["content"]

    def test_dangling_edge_counted(self, client: TestClient, graph_payload: dict) -> None:
        """Test dangling edges are reported but not drawn."""
        ghost = {"type": "asset", "id": "ghost", "name": "Ghost"}
        graph_payload["edges"].append(
            {"source": graph_payload["nodes"][0], "target": ghost, "relationshipType": "affects"}
        )
        data = client.post("/topology/render", json={"graph": graph_payload}).json()
        assert data["edge_count"] == 2
        assert data["rendered_edge_count"] == 1

    @pytest.mark.parametrize(
        "overrides",
        [{"width": 0}, {"height": -10}, {"width": 100000}, {"ticks": -1}],
    )
    def test_invalid_size(self, client: TestClient, graph_payload: dict, overrides: dict) -> None:
        """Test out-of-range dimensions are rejected."""
        response = client.post("/topology/render", json={"graph": graph_payload, **overrides})
        assert response.status_code == 422

    def test_unknown_entity_type(self, client: TestClient, graph_payload: dict) -> None:
        graph_payload["nodes"][0]["type"] = "spaceship"
        response = client.post("/topology/render", json={"graph": graph_payload})
        assert response.status_code == 422


class TestArtifactEndpoint:
    """Tests for /topology/artifact/{presentation}."""

    def test_inline(self, client: TestClient, graph_payload: dict) -> None:
        response = client.post(
            "/topology/artifact/inline", json={"title": "Risks", "block": graph_payload}
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "2 nodes • 1 edges" in response.text

    def test_expanded_wrapped(self, client: TestClient, graph_payload: dict) -> None:
        response = client.post(
            "/topology/artifact/expanded", json={"block": {"graph": graph_payload}}
        )
        assert response.status_code == 200
        assert 'viewBox="0 0 760 420"' in response.text

    def test_unsupported_block(self, client: TestClient) -> None:
        response = client.post("/topology/artifact/fullscreen", json={"block": {"foo": 1}})
        assert response.status_code == 400

    def test_unknown_presentation(self, client: TestClient, graph_payload: dict) -> None:
        response = client.post("/topology/artifact/sideways", json={"block": graph_payload})
        assert response.status_code == 404
