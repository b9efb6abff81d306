from __future__ import annotations

import asyncio
import json
from typing import Any

from fastapi import WebSocket

from geocoding_gateway_service.logging_utils import create_service_logger

logger = create_service_logger("gateway.websocket_manager")


class _Connection:
    __slots__ = ("websocket", "send_lock")

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self.send_lock = asyncio.Lock()


class WebSocketManager:
    """
    Tracks WebSocket connections by connection id and emits named events.
    Each connection has its own send lock so concurrent replies never interleave.
    """

    def __init__(self) -> None:
        self._connections: dict[str, _Connection] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, connection_id: str) -> None:
        """Register an accepted WebSocket connection."""
        async with self._lock:
            self._connections[connection_id] = _Connection(websocket)
            total = len(self._connections)
        logger.info(
            "Client connected",
            connection_id=connection_id,
            total_connections=total,
        )

    async def disconnect(self, connection_id: str) -> None:
        """Remove a WebSocket connection."""
        async with self._lock:
            removed = self._connections.pop(connection_id, None)
            total = len(self._connections)
        if removed is None:
            logger.warning(
                "Attempted to remove non-existent WebSocket connection",
                connection_id=connection_id,
            )
            return
        logger.info(
            "Client disconnected",
            connection_id=connection_id,
            total_connections=total,
        )

    async def emit(self, connection_id: str, event: str, data: Any) -> bool:
        """
        Send {"event": event, "data": data} to a single connection.
        Returns False when the connection is gone or the send failed.
        """
        async with self._lock:
            connection = self._connections.get(connection_id)

        if connection is None:
            # Client left before the reply was ready
            logger.debug(
                "Dropping event for closed connection",
                connection_id=connection_id,
                event_name=event,
            )
            return False

        message = json.dumps({"event": event, "data": data})
        async with connection.send_lock:
            try:
                await connection.websocket.send_text(message)
            except Exception as e:
                logger.warning(
                    "Failed to emit event",
                    connection_id=connection_id,
                    event_name=event,
                    error=str(e),
                )
                return False
        return True

    def get_total_connections(self) -> int:
        """Get the number of active connections."""
        return len(self._connections)
