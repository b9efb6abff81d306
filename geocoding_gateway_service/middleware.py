"""Geocoding Gateway Service middleware components."""

from __future__ import annotations

from uuid import UUID, uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, unbind_contextvars

from geocoding_gateway_service.logging_utils import create_service_logger

logger = create_service_logger("gateway.middleware")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure every HTTP request has a correlation ID."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Extract or generate correlation ID, store it in request state and log context."""
        x_correlation_id = request.headers.get("X-Correlation-ID")
        if x_correlation_id:
            try:
                correlation_id = UUID(x_correlation_id)
            except ValueError:
                logger.warning(
                    "Invalid correlation ID format, generating new one",
                    received=x_correlation_id,
                )
                correlation_id = uuid4()
        else:
            correlation_id = uuid4()

        request.state.correlation_id = correlation_id
        bind_contextvars(correlation_id=str(correlation_id))
        try:
            response = await call_next(request)
        finally:
            unbind_contextvars("correlation_id")
        response.headers["X-Correlation-ID"] = str(correlation_id)
        return response
