"""
WebSocket transport for geocoding requests.

Frames are JSON objects {"event": <name>, "data": <payload>}. Every
geocoding-request event is handled in its own task and answered with a
geocoding-response event on the same connection only.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any
from uuid import uuid4

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError
from structlog.contextvars import bind_contextvars, unbind_contextvars

from geocoding_gateway_service.logging_utils import create_service_logger
from geocoding_gateway_service.metrics import GatewayMetrics
from geocoding_gateway_service.models import (
    GEOCODING_REQUEST_EVENT,
    GEOCODING_RESPONSE_EVENT,
    INVALID_BODY_MESSAGE,
    TEXT_REQUIRED_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    GeocodeQuery,
    GeocodeRequest,
    GeocodeResponse,
    RealtimeMessage,
)
from geocoding_gateway_service.protocols import (
    GeocodeTranslatorProtocol,
    WebSocketManagerProtocol,
)

router = APIRouter()
logger = create_service_logger("gateway.websocket_routes")

# Keeps in-flight request tasks referenced until they finish
_pending_tasks: set[asyncio.Task[None]] = set()


def _on_task_done(task: asyncio.Task[None]) -> None:
    _pending_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Realtime request task failed", exc_info=exc)


def _parse_frame(raw: str | bytes | None) -> RealtimeMessage | None:
    if raw is None:
        return None
    try:
        return RealtimeMessage.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as e:
        logger.warning("Ignoring malformed frame", error=str(e))
        return None


async def handle_geocoding_request(
    connection_id: str,
    data: Any,
    translator: GeocodeTranslatorProtocol,
    websocket_manager: WebSocketManagerProtocol,
    metrics: GatewayMetrics,
) -> None:
    """Resolve one geocoding-request event and reply to its connection."""
    correlation_id = uuid4()
    bind_contextvars(correlation_id=str(correlation_id))

    try:
        request = GeocodeRequest.model_validate(data if data is not None else {})
    except ValidationError as e:
        logger.warning("Invalid geocoding-request payload", error=str(e))
        envelope = GeocodeResponse.error(INVALID_BODY_MESSAGE)
        label = "invalid"
    else:
        if not request.text:
            envelope = GeocodeResponse.error(TEXT_REQUIRED_MESSAGE)
            label = "invalid"
        else:
            query = GeocodeQuery(text=request.text, k=request.k)
            try:
                envelope = await translator.translate(query, correlation_id=correlation_id)
                label = envelope.status
            except Exception as e:
                logger.error("Error handling geocoding request", error=str(e), exc_info=True)
                envelope = GeocodeResponse.error(str(e) or UNKNOWN_ERROR_MESSAGE)
                label = "internal_error"

    metrics.geocoding_requests_total.labels(transport="websocket", status=label).inc()
    await websocket_manager.emit(connection_id, GEOCODING_RESPONSE_EVENT, envelope.to_payload())


@router.websocket("/ws")
@inject
async def websocket_endpoint(
    websocket: WebSocket,
    translator: FromDishka[GeocodeTranslatorProtocol],
    websocket_manager: FromDishka[WebSocketManagerProtocol],
    metrics: FromDishka[GatewayMetrics],
) -> None:
    """
    Realtime geocoding endpoint.

    The receive loop never waits on the upstream service, so one slow request
    does not hold back later frames or other connections.
    """
    connection_id = str(uuid4())
    bind_contextvars(connection_id=connection_id)

    await websocket.accept()
    await websocket_manager.connect(websocket, connection_id)
    metrics.websocket_connections_total.labels(status="accepted").inc()
    metrics.websocket_active_connections.inc()

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(code=frame.get("code", status.WS_1000_NORMAL_CLOSURE))

            message = _parse_frame(frame.get("text") or frame.get("bytes"))
            if message is None:
                continue
            if message.event != GEOCODING_REQUEST_EVENT:
                logger.warning("Ignoring unknown event", event_name=message.event)
                continue

            task = asyncio.create_task(
                handle_geocoding_request(
                    connection_id, message.data, translator, websocket_manager, metrics
                )
            )
            _pending_tasks.add(task)
            task.add_done_callback(_on_task_done)

    except WebSocketDisconnect as e:
        logger.info("WebSocket disconnected by client", code=e.code)
    except Exception as e:
        logger.error(f"Unexpected error in WebSocket endpoint: {e}", exc_info=True)
        try:
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        except RuntimeError:
            logger.debug("WebSocket already closed")
    finally:
        await websocket_manager.disconnect(connection_id)
        metrics.websocket_active_connections.dec()
        metrics.websocket_connections_total.labels(status="closed").inc()
        unbind_contextvars("connection_id")
