"""Health and metrics routes for Geocoding Gateway Service."""

from __future__ import annotations

from typing import Any

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from geocoding_gateway_service.config import Settings
from geocoding_gateway_service.logging_utils import create_service_logger
from geocoding_gateway_service.protocols import WebSocketManagerProtocol

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness check. Does not depend on the upstream service."""
    return {"status": "healthy"}


@router.get("/healthz/websocket")
@inject
async def websocket_health(
    websocket_manager: FromDishka[WebSocketManagerProtocol],
    settings: FromDishka[Settings],
) -> dict[str, Any]:
    """Report WebSocket manager status."""
    return {
        "service": settings.SERVICE_NAME,
        "status": "healthy",
        "total_connections": websocket_manager.get_total_connections(),
    }


@router.get("/metrics", response_class=PlainTextResponse)
@inject
async def metrics(registry: FromDishka[CollectorRegistry]) -> PlainTextResponse:
    """Prometheus metrics endpoint."""
    logger = create_service_logger("gateway.health_routes")
    try:
        return PlainTextResponse(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)
    except Exception as e:
        logger.error(f"Error generating metrics: {e}", exc_info=True)
        return PlainTextResponse(content="Error generating metrics", status_code=500)
