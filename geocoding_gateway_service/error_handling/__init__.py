"""Structured error handling for the Geocoding Gateway Service."""

from geocoding_gateway_service.error_handling.error_models import ErrorCode, ErrorDetail
from geocoding_gateway_service.error_handling.factories import (
    raise_connection_error,
    raise_external_service_error,
    raise_invalid_response,
    raise_timeout_error,
    raise_validation_error,
)
from geocoding_gateway_service.error_handling.gateway_error import GatewayError, UpstreamError

__all__ = [
    "ErrorCode",
    "ErrorDetail",
    "GatewayError",
    "UpstreamError",
    "raise_connection_error",
    "raise_external_service_error",
    "raise_invalid_response",
    "raise_timeout_error",
    "raise_validation_error",
]
