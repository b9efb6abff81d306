"""
Tests for health and metrics endpoints in Geocoding Gateway Service.
"""

from __future__ import annotations

from typing import Callable

from fastapi import FastAPI
from fastapi.testclient import TestClient
from prometheus_client.parser import text_string_to_metric_families

from geocoding_gateway_service.tests.conftest import MockGeocodingClient, geocoding_request


class TestHealthRoutes:
    """Test suite for health check endpoints."""

    def test_health_check_returns_healthy(self, create_test_app: Callable[..., FastAPI]) -> None:
        app = create_test_app()

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_health_check_ignores_upstream_state(
        self,
        create_test_app: Callable[..., FastAPI],
        mock_geocoding_client: MockGeocodingClient,
    ) -> None:
        """Test liveness does not consult the upstream service at all."""
        mock_geocoding_client.fail_with_upstream_error = True
        app = create_test_app()

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert mock_geocoding_client.calls == []

    def test_websocket_health_reports_connection_count(
        self, create_test_app: Callable[..., FastAPI]
    ) -> None:
        app = create_test_app()

        with TestClient(app) as client:
            with client.websocket_connect("/ws") as websocket:
                # Round trip guarantees the connection is registered
                websocket.send_json(geocoding_request("Paris"))
                websocket.receive_json()
                during = client.get("/healthz/websocket").json()

        assert during["status"] == "healthy"
        assert during["service"] == "geocoding-gateway-service"
        assert during["total_connections"] == 1

    def test_metrics_endpoint(self, create_test_app: Callable[..., FastAPI]) -> None:
        """Test Prometheus metrics endpoint returns request counters."""
        app = create_test_app()

        with TestClient(app) as client:
            client.post("/geocode", json={"text": "Paris"})
            response = client.get("/metrics")

        samples = [
            sample
            for family in text_string_to_metric_families(response.text)
            for sample in family.samples
            if sample.name == "geocoding_requests_total"
        ]
        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert [(s.labels, s.value) for s in samples] == [
            ({"transport": "http", "status": "success"}, 1.0)
        ]
