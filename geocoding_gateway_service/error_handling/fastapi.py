"""FastAPI exception handlers rendering every failure as an error envelope."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from geocoding_gateway_service.error_handling.error_models import ErrorCode
from geocoding_gateway_service.error_handling.gateway_error import GatewayError
from geocoding_gateway_service.logging_utils import create_service_logger
from geocoding_gateway_service.models import (
    INTERNAL_ERROR_MESSAGE,
    INVALID_BODY_MESSAGE,
    GeocodeResponse,
)

logger = create_service_logger("gateway.error_handlers")


def status_code_for(error: GatewayError) -> int:
    """Map an error to its HTTP status.

    Upstream failures are folded into the envelope by the translator and
    never reach the handlers, so only validation has a status of its own.
    """
    if error.error_detail.error_code == ErrorCode.VALIDATION_ERROR:
        return 400
    return 500


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=GeocodeResponse.error(message).to_payload(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers so that no exception leaves the app in raw form."""

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        status_code = status_code_for(exc)
        # Validation messages are written for callers
        message = exc.error_detail.message if status_code == 400 else INTERNAL_ERROR_MESSAGE
        logger.warning(
            "Gateway error",
            path=request.url.path,
            status_code=status_code,
            **exc.log_context(),
        )
        return _envelope(status_code, message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("Malformed request body", path=request.url.path, errors=exc.errors())
        return _envelope(400, INVALID_BODY_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        # Runs in ServerErrorMiddleware, outside CorrelationIDMiddleware
        correlation_id = getattr(request.state, "correlation_id", None)
        logger.error(
            "Unhandled error",
            path=request.url.path,
            correlation_id=str(correlation_id) if correlation_id else None,
            exc_info=exc,
        )
        response = _envelope(500, INTERNAL_ERROR_MESSAGE)
        if correlation_id is not None:
            response.headers["X-Correlation-ID"] = str(correlation_id)
        return response
