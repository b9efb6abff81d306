"""
Test configuration for Geocoding Gateway Service.

Upstream and translator collaborators are replaced through a test Dishka
provider; the transport adapters under test are the real ones.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable
from uuid import UUID, uuid4

import pytest
from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from fastapi import FastAPI
from prometheus_client import CollectorRegistry

from geocoding_gateway_service.config import Environment, Settings
from geocoding_gateway_service.error_handling import raise_connection_error
from geocoding_gateway_service.implementations.request_translator import (
    GeocodeRequestTranslator,
)
from geocoding_gateway_service.implementations.websocket_manager import WebSocketManager
from geocoding_gateway_service.metrics import GatewayMetrics
from geocoding_gateway_service.models import GeocodeQuery, GeocodeResponse, GeocodeResult
from geocoding_gateway_service.protocols import (
    GeocodeTranslatorProtocol,
    GeocodingClientProtocol,
    WebSocketManagerProtocol,
)

UPSTREAM_URL = "http://geocoding.test"

PARIS_RESULT: GeocodeResult = {
    "display_name": "Paris, France",
    "confidence": [0.98],
    "boundingboxes": [[2.22, 48.81, 2.47, 48.9]],
    "levels_polygons": [[1.0, 2.0, 3.0]],
}


class MockGeocodingClient:
    """Mock upstream client recording every call.

    Results for a text come from `results_by_text`, falling back to a single
    {"display_name": text} object. Texts listed in `held_texts` wait until
    `release_text` has been requested.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str | int | None]] = []
        self.results_by_text: dict[str, list[GeocodeResult]] = {}
        self.fail_with_upstream_error = False
        self.held_texts: set[str] = set()
        self.release_text = "release"
        self.released = asyncio.Event()

    async def fetch_geocoding(
        self,
        text: str,
        k: str | int | None = None,
        *,
        correlation_id: UUID | None = None,
    ) -> list[GeocodeResult]:
        self.calls.append((text, k))

        if text in self.held_texts:
            try:
                await asyncio.wait_for(self.released.wait(), timeout=5)
            except asyncio.TimeoutError:
                raise RuntimeError(f"{text!r} was never released") from None
        elif text == self.release_text:
            self.released.set()

        if self.fail_with_upstream_error:
            raise_connection_error(
                service="test",
                operation="fetch_geocoding",
                target="geocoding_service",
                message="Connection refused",
                correlation_id=correlation_id or uuid4(),
            )
        return self.results_by_text.get(text, [{"display_name": text}])


class ExplodingTranslator:
    """Translator whose invocation itself fails."""

    def __init__(self, message: str = "translator exploded") -> None:
        self.message = message
        self.calls: list[GeocodeQuery] = []

    async def translate(
        self, query: GeocodeQuery, *, correlation_id: UUID | None = None
    ) -> GeocodeResponse:
        self.calls.append(query)
        raise RuntimeError(self.message)


class MockGatewayProvider(Provider):
    """Test provider for Geocoding Gateway Service."""

    scope = Scope.APP

    def __init__(
        self,
        geocoding_client: MockGeocodingClient,
        translator: GeocodeTranslatorProtocol | None = None,
        websocket_manager: WebSocketManager | None = None,
    ) -> None:
        super().__init__()
        self._geocoding_client = geocoding_client
        self._translator = translator
        self._websocket_manager = websocket_manager or WebSocketManager()

    @provide
    def get_config(self) -> Settings:
        """Provide test settings."""
        return Settings(
            GEOCODING_SERVICE_URL=UPSTREAM_URL,
            ENVIRONMENT=Environment.TESTING,
        )

    @provide
    def provide_registry(self) -> CollectorRegistry:
        """Provide isolated registry for tests."""
        return CollectorRegistry()

    @provide
    def provide_metrics(self, registry: CollectorRegistry) -> GatewayMetrics:
        """Provide metrics with isolated registry."""
        return GatewayMetrics(registry=registry)

    @provide
    def provide_geocoding_client(self) -> GeocodingClientProtocol:
        """Provide mock upstream client."""
        return self._geocoding_client

    @provide
    def provide_translator(self, client: GeocodingClientProtocol) -> GeocodeTranslatorProtocol:
        """Provide the real translator unless a replacement was given."""
        return self._translator or GeocodeRequestTranslator(client=client)

    @provide
    def provide_websocket_manager(self) -> WebSocketManagerProtocol:
        """Provide real WebSocket manager."""
        return self._websocket_manager


@pytest.fixture
def mock_geocoding_client() -> MockGeocodingClient:
    """Fixture for mock upstream client."""
    return MockGeocodingClient()


@pytest.fixture
def websocket_manager() -> WebSocketManager:
    """Fixture for the connection registry shared with the test app."""
    return WebSocketManager()


@pytest.fixture
def create_test_app(
    mock_geocoding_client: MockGeocodingClient,
    websocket_manager: WebSocketManager,
) -> Callable[..., FastAPI]:
    """Create test FastAPI app with mocked upstream dependencies."""
    from geocoding_gateway_service.app import create_app

    def _create_app(translator: GeocodeTranslatorProtocol | None = None) -> FastAPI:
        container: AsyncContainer = make_async_container(
            MockGatewayProvider(
                geocoding_client=mock_geocoding_client,
                translator=translator,
                websocket_manager=websocket_manager,
            )
        )
        return create_app(
            config=Settings(GEOCODING_SERVICE_URL=UPSTREAM_URL, ENVIRONMENT=Environment.TESTING),
            container=container,
        )

    return _create_app


def geocoding_request(text: Any = None, k: Any = None) -> dict[str, Any]:
    """Build a geocoding-request frame."""
    data: dict[str, Any] = {}
    if text is not None:
        data["text"] = text
    if k is not None:
        data["k"] = k
    return {"event": "geocoding-request", "data": data}
