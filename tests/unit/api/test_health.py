"""Tests for the health check endpoints."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from leadsift import __version__
from leadsift.adapters.base.adapter import AdapterHealth
from leadsift.api.app import create_app
from leadsift.api.deps import get_engine, set_engine
from leadsift.config.settings import Settings
from leadsift.core.engine import LeadSearchEngine


@pytest.fixture
def client(settings: Settings, adapter: MagicMock) -> Iterator[TestClient]:
    """Create a test client for the API."""
    app = create_app(settings, adapter=adapter)
    set_engine(LeadSearchEngine(settings, adapter=adapter))
    yield TestClient(app)
    set_engine(None)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient, adapter: MagicMock) -> None:
        response = client.get("/v1/health")
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "version": __version__,
            "service": "leadsift",
            "adapter": "opensearch",
            "index_candidates": ["leads_v3", "leads_v2", "leads", "merged_index_v1"],
        }
        adapter.health_check.assert_not_awaited()

    def test_opensearch_health(self, client: TestClient) -> None:
        response = client.get("/v1/health/opensearch")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["latency_ms"] == 2

    def test_opensearch_unhealthy(self, client: TestClient, adapter: MagicMock) -> None:
        adapter.health_check.return_value = AdapterHealth(status="unhealthy", message="Client not initialized")
        data = client.get("/v1/health/opensearch").json()
        assert data["status"] == "unhealthy"
        assert data["message"] == "Client not initialized"


class TestLifespan:
    def test_lifespan_initializes_and_shuts_down(self, settings: Settings, adapter: MagicMock) -> None:
        app = create_app(settings, adapter=adapter)
        with TestClient(app) as client:
            assert client.get("/v1/health").status_code == 200
            assert app.state.engine.adapter is adapter
            adapter.initialize.assert_awaited_once()
        adapter.shutdown.assert_awaited_once()
        with pytest.raises(RuntimeError):
            get_engine()
