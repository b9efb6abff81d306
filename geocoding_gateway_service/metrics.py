from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram


class GatewayMetrics:
    """Prometheus metrics for Geocoding Gateway Service."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.geocoding_requests_total = Counter(
            "geocoding_requests_total",
            "Total number of geocoding requests handled",
            ["transport", "status"],  # status: success, error, invalid, internal_error
            registry=registry,
        )

        self.upstream_requests_total = Counter(
            "geocoding_upstream_requests_total",
            "Total number of calls to the upstream geocoding service",
            ["outcome"],  # outcome: success, connection_error, timeout, http_error, invalid_response
            registry=registry,
        )

        self.upstream_request_duration_seconds = Histogram(
            "geocoding_upstream_request_duration_seconds",
            "Duration of upstream geocoding calls in seconds",
            registry=registry,
        )

        self.websocket_connections_total = Counter(
            "geocoding_websocket_connections_total",
            "Total number of WebSocket connections",
            ["status"],  # status: accepted, closed
            registry=registry,
        )

        self.websocket_active_connections = Gauge(
            "geocoding_websocket_active_connections",
            "Number of currently active WebSocket connections",
            registry=registry,
        )
