"""
Protocols for Geocoding Gateway Service.

Transport adapters depend on these protocols, not on concrete implementations.
"""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from geocoding_gateway_service.models import GeocodeQuery, GeocodeResponse, GeocodeResult


class GeocodingClientProtocol(Protocol):
    """Protocol for the upstream geocoding service HTTP client."""

    async def fetch_geocoding(
        self,
        text: str,
        k: str | int | None = None,
        *,
        correlation_id: UUID | None = None,
    ) -> list[GeocodeResult]:
        """
        Query the upstream service.
        Raises UpstreamError on any failure; no retry is attempted.
        """
        ...


class GeocodeTranslatorProtocol(Protocol):
    """
    Protocol for the request translator shared by both transports.
    """

    async def translate(
        self, query: GeocodeQuery, *, correlation_id: UUID | None = None
    ) -> GeocodeResponse:
        """
        Resolve a query into a normalized envelope.
        Upstream failures are folded into an error envelope, never raised.
        """
        ...


class WebSocketManagerProtocol(Protocol):
    """
    Protocol for tracking WebSocket connections and emitting events to them.
    """

    async def connect(self, websocket: Any, connection_id: str) -> None:
        """Register an accepted WebSocket connection."""
        ...

    async def disconnect(self, connection_id: str) -> None:
        """Remove a WebSocket connection."""
        ...

    async def emit(self, connection_id: str, event: str, data: Any) -> bool:
        """
        Send a named event to a single connection.
        Returns False when the connection is gone or the send failed.
        """
        ...

    def get_total_connections(self) -> int:
        """Get the number of active connections."""
        ...
