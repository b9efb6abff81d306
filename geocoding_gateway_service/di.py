"""Dependency Injection providers for Geocoding Gateway Service.

Everything is APP-scoped: requests share no state beyond these singletons.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, provide
from prometheus_client import REGISTRY, CollectorRegistry

from geocoding_gateway_service.config import Settings, settings
from geocoding_gateway_service.implementations.geocoding_client import GeocodingServiceClient
from geocoding_gateway_service.implementations.request_translator import (
    GeocodeRequestTranslator,
)
from geocoding_gateway_service.implementations.websocket_manager import WebSocketManager
from geocoding_gateway_service.metrics import GatewayMetrics
from geocoding_gateway_service.protocols import (
    GeocodeTranslatorProtocol,
    GeocodingClientProtocol,
    WebSocketManagerProtocol,
)


class GeocodingGatewayProvider(Provider):
    """Dependency injection provider for Geocoding Gateway Service."""

    scope = Scope.APP

    @provide
    def get_config(self) -> Settings:
        """Provide service configuration."""
        return settings

    @provide
    async def get_http_client(self, config: Settings) -> AsyncIterator[httpx.AsyncClient]:
        """Provide the HTTP client used for upstream calls."""
        if config.UPSTREAM_TIMEOUT_SECONDS is None:
            client = httpx.AsyncClient()
        else:
            client = httpx.AsyncClient(timeout=httpx.Timeout(config.UPSTREAM_TIMEOUT_SECONDS))
        async with client:
            yield client

    @provide
    def provide_registry(self) -> CollectorRegistry:
        """Provide Prometheus registry."""
        return REGISTRY

    @provide
    def provide_metrics(self, registry: CollectorRegistry) -> GatewayMetrics:
        """Provide Prometheus metrics collector."""
        return GatewayMetrics(registry=registry)

    @provide
    def provide_geocoding_client(
        self,
        http_client: httpx.AsyncClient,
        config: Settings,
        metrics: GatewayMetrics,
    ) -> GeocodingClientProtocol:
        """Provide upstream geocoding client."""
        return GeocodingServiceClient(
            http_client=http_client,
            base_url=config.GEOCODING_SERVICE_URL,
            metrics=metrics,
        )

    @provide
    def provide_translator(self, client: GeocodingClientProtocol) -> GeocodeTranslatorProtocol:
        """Provide the request translator shared by both transports."""
        return GeocodeRequestTranslator(client=client)

    @provide
    def provide_websocket_manager(self) -> WebSocketManagerProtocol:
        """Provide WebSocket connection manager."""
        return WebSocketManager()
