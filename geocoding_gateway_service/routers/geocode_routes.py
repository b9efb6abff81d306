"""HTTP transport for geocoding requests."""

from __future__ import annotations

from uuid import uuid4

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from geocoding_gateway_service.error_handling import raise_validation_error
from geocoding_gateway_service.logging_utils import create_service_logger
from geocoding_gateway_service.metrics import GatewayMetrics
from geocoding_gateway_service.models import (
    INTERNAL_ERROR_MESSAGE,
    TEXT_REQUIRED_MESSAGE,
    GeocodeQuery,
    GeocodeRequest,
    GeocodeResponse,
)
from geocoding_gateway_service.protocols import GeocodeTranslatorProtocol

router = APIRouter()
logger = create_service_logger("gateway.geocode_routes")


@router.post(
    "/geocode",
    response_model=GeocodeResponse,
    responses={
        400: {"model": GeocodeResponse, "description": "Missing text or malformed body"},
        500: {"model": GeocodeResponse, "description": "Internal failure"},
    },
)
@inject
async def geocode(
    request: Request,
    translator: FromDishka[GeocodeTranslatorProtocol],
    metrics: FromDishka[GatewayMetrics],
    body: GeocodeRequest | None = None,
) -> JSONResponse:
    """
    Geocode a free-text query.

    Upstream failures still answer 200: the envelope reports them with
    status "error". Only local failures produce a 5xx.
    """
    correlation_id = getattr(request.state, "correlation_id", None) or uuid4()

    if body is None or not body.text:
        metrics.geocoding_requests_total.labels(transport="http", status="invalid").inc()
        raise_validation_error(
            service="geocoding_gateway_service",
            operation="geocode",
            field="text",
            message=TEXT_REQUIRED_MESSAGE,
            correlation_id=correlation_id,
        )

    query = GeocodeQuery(text=body.text, k=body.k)
    try:
        envelope = await translator.translate(query, correlation_id=correlation_id)
    except Exception as e:
        logger.error(
            "Geocoding request failed",
            error=str(e),
            correlation_id=str(correlation_id),
            exc_info=True,
        )
        metrics.geocoding_requests_total.labels(transport="http", status="internal_error").inc()
        return JSONResponse(
            status_code=500,
            content=GeocodeResponse.error(INTERNAL_ERROR_MESSAGE).to_payload(),
        )

    metrics.geocoding_requests_total.labels(transport="http", status=envelope.status).inc()
    return JSONResponse(status_code=200, content=envelope.to_payload())
