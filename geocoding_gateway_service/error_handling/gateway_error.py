"""Exception types raised inside the gateway."""

from __future__ import annotations

from typing import Any

from geocoding_gateway_service.error_handling.error_models import ErrorDetail


class GatewayError(Exception):
    """Base exception carrying a structured ErrorDetail."""

    def __init__(self, error_detail: ErrorDetail) -> None:
        self.error_detail = error_detail
        super().__init__(f"[{error_detail.error_code.value}] {error_detail.message}")

    @property
    def correlation_id(self) -> str:
        return str(self.error_detail.correlation_id)

    @property
    def error_code(self) -> str:
        return self.error_detail.error_code.value

    @property
    def service(self) -> str:
        return self.error_detail.service

    @property
    def operation(self) -> str:
        return self.error_detail.operation

    def log_context(self) -> dict[str, Any]:
        """Flatten the error detail into structured log fields."""
        return {
            "error_code": self.error_code,
            "error_message": self.error_detail.message,
            "correlation_id": self.correlation_id,
            "service": self.service,
            "operation": self.operation,
            **self.error_detail.details,
        }


class UpstreamError(GatewayError):
    """The upstream geocoding service could not produce a usable result."""
