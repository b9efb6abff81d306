"""Request translator shared by the HTTP and WebSocket transports."""

from __future__ import annotations

from uuid import UUID, uuid4

from geocoding_gateway_service.error_handling import UpstreamError
from geocoding_gateway_service.logging_utils import create_service_logger
from geocoding_gateway_service.models import (
    UPSTREAM_FAILURE_MESSAGE,
    GeocodeQuery,
    GeocodeResponse,
)
from geocoding_gateway_service.protocols import GeocodingClientProtocol

logger = create_service_logger("gateway.translator")


class GeocodeRequestTranslator:
    """
    Turns a GeocodeQuery into a GeocodeResponse envelope.

    Upstream failures become an error envelope with a fixed message; the
    detailed cause is only logged. Any other exception propagates to the
    transport adapter.
    """

    def __init__(self, client: GeocodingClientProtocol) -> None:
        self._client = client

    async def translate(
        self, query: GeocodeQuery, *, correlation_id: UUID | None = None
    ) -> GeocodeResponse:
        correlation_id = correlation_id or uuid4()
        try:
            results = await self._client.fetch_geocoding(
                query.text, query.k, correlation_id=correlation_id
            )
        except UpstreamError as e:
            logger.error("Error calling geocoding service", **e.log_context())
            return GeocodeResponse.error(UPSTREAM_FAILURE_MESSAGE)

        return GeocodeResponse.success(results)
