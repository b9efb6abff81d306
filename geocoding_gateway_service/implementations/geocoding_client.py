"""HTTP client for the upstream geocoding service."""

from __future__ import annotations

import time
from uuid import UUID, uuid4

import httpx

from geocoding_gateway_service.error_handling import (
    raise_connection_error,
    raise_external_service_error,
    raise_invalid_response,
    raise_timeout_error,
)
from geocoding_gateway_service.logging_utils import create_service_logger
from geocoding_gateway_service.metrics import GatewayMetrics
from geocoding_gateway_service.models import GeocodeResult

logger = create_service_logger("gateway.geocoding_client")

SERVICE = "geocoding_gateway_service"
OPERATION = "fetch_geocoding"
UPSTREAM = "geocoding_service"


class GeocodingServiceClient:
    """Single-attempt client for GET {base_url}/geocoding."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        metrics: GatewayMetrics | None = None,
    ) -> None:
        """Initialize with shared HTTP client.

        Args:
            http_client: Shared httpx AsyncClient instance
            base_url: Upstream base URL without trailing slash
            metrics: Optional metrics collector
        """
        self._client = http_client
        self._url = f"{base_url.rstrip('/')}/geocoding"
        self._metrics = metrics

    def _record(self, outcome: str, started: float) -> None:
        if self._metrics is None:
            return
        self._metrics.upstream_requests_total.labels(outcome=outcome).inc()
        self._metrics.upstream_request_duration_seconds.observe(time.monotonic() - started)

    async def fetch_geocoding(
        self,
        text: str,
        k: str | int | None = None,
        *,
        correlation_id: UUID | None = None,
    ) -> list[GeocodeResult]:
        """Query the upstream geocoding service.

        Args:
            text: Free-text query, URL-encoded into the `text` parameter
            k: Optional result-count hint, sent as `k` only when provided
            correlation_id: Request correlation ID for logs

        Returns:
            The upstream result list, unmodified

        Raises:
            UpstreamError: On network failure, timeout, non-2xx status or
                a body that is not a JSON array
        """
        correlation_id = correlation_id or uuid4()
        params: dict[str, str | int] = {"text": text}
        if k:
            params["k"] = k

        logger.debug(
            "Calling geocoding service",
            url=self._url,
            has_k="k" in params,
            correlation_id=str(correlation_id),
        )

        started = time.monotonic()
        try:
            response = await self._client.get(self._url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            self._record("timeout", started)
            logger.error(
                "Geocoding service timeout",
                error=repr(e),
                correlation_id=str(correlation_id),
            )
            raise_timeout_error(
                service=SERVICE,
                operation=OPERATION,
                timeout_seconds=self._client.timeout.read,
                message=f"Geocoding service request timed out: {e!r}",
                correlation_id=correlation_id,
            )
        except httpx.HTTPStatusError as e:
            self._record("http_error", started)
            logger.error(
                "Geocoding service returned an error status",
                status_code=e.response.status_code,
                correlation_id=str(correlation_id),
            )
            raise_external_service_error(
                service=SERVICE,
                operation=OPERATION,
                external_service=UPSTREAM,
                message=f"Geocoding service responded with HTTP {e.response.status_code}",
                correlation_id=correlation_id,
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            self._record("connection_error", started)
            logger.error(
                "Geocoding service connection error",
                error=repr(e),
                correlation_id=str(correlation_id),
            )
            raise_connection_error(
                service=SERVICE,
                operation=OPERATION,
                target=UPSTREAM,
                message=f"Failed to reach geocoding service: {e!r}",
                correlation_id=correlation_id,
            )
        except ValueError as e:
            self._record("invalid_response", started)
            logger.error(
                "Geocoding service returned malformed JSON",
                error=str(e),
                correlation_id=str(correlation_id),
            )
            raise_invalid_response(
                service=SERVICE,
                operation=OPERATION,
                message="Geocoding service returned malformed JSON",
                correlation_id=correlation_id,
            )

        if not isinstance(data, list):
            self._record("invalid_response", started)
            logger.error(
                "Geocoding service returned a non-list body",
                body_type=type(data).__name__,
                correlation_id=str(correlation_id),
            )
            raise_invalid_response(
                service=SERVICE,
                operation=OPERATION,
                message=f"Expected a JSON array, got {type(data).__name__}",
                correlation_id=correlation_id,
            )

        self._record("success", started)
        logger.info(
            "Fetched geocoding results",
            result_count=len(data),
            correlation_id=str(correlation_id),
        )
        return data
