"""
Factory functions that build an ErrorDetail and raise the matching exception.

Validation failures raise GatewayError; failures talking to the upstream
service raise UpstreamError so the translator can fold them into the envelope.
"""

from __future__ import annotations

from typing import Any, NoReturn
from uuid import UUID

from geocoding_gateway_service.error_handling.error_models import ErrorCode, ErrorDetail
from geocoding_gateway_service.error_handling.gateway_error import GatewayError, UpstreamError


def _detail(
    error_code: ErrorCode,
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID,
    **details: Any,
) -> ErrorDetail:
    return ErrorDetail(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id,
        service=service,
        operation=operation,
        details=details,
    )


def raise_validation_error(
    service: str,
    operation: str,
    field: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise a GatewayError for invalid caller input."""
    raise GatewayError(
        _detail(
            ErrorCode.VALIDATION_ERROR,
            service,
            operation,
            message,
            correlation_id,
            field=field,
            **additional_context,
        )
    )


def raise_connection_error(
    service: str,
    operation: str,
    target: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise an UpstreamError for a network-level failure reaching `target`."""
    raise UpstreamError(
        _detail(
            ErrorCode.CONNECTION_ERROR,
            service,
            operation,
            message,
            correlation_id,
            target=target,
            **additional_context,
        )
    )


def raise_timeout_error(
    service: str,
    operation: str,
    timeout_seconds: float | None,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise an UpstreamError for a request that timed out."""
    raise UpstreamError(
        _detail(
            ErrorCode.TIMEOUT,
            service,
            operation,
            message,
            correlation_id,
            timeout_seconds=timeout_seconds,
            **additional_context,
        )
    )


def raise_external_service_error(
    service: str,
    operation: str,
    external_service: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise an UpstreamError for a non-success response from `external_service`."""
    raise UpstreamError(
        _detail(
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            service,
            operation,
            message,
            correlation_id,
            external_service=external_service,
            **additional_context,
        )
    )


def raise_invalid_response(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise an UpstreamError for a response body that cannot be used."""
    raise UpstreamError(
        _detail(
            ErrorCode.INVALID_RESPONSE,
            service,
            operation,
            message,
            correlation_id,
            **additional_context,
        )
    )
