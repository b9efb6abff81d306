"""Request, response and realtime frame models for the gateway.

The GeocodeResponse envelope is the single shape both transports return.
Results are passed through from the upstream service without interpretation.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Caller-facing messages. These strings are part of the public contract.
TEXT_REQUIRED_MESSAGE = "Text query is required"
UPSTREAM_FAILURE_MESSAGE = "Failed to communicate with geocoding service"
INVALID_BODY_MESSAGE = "Invalid request body"
INTERNAL_ERROR_MESSAGE = "Internal server error"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"

# Realtime event names
GEOCODING_REQUEST_EVENT = "geocoding-request"
GEOCODING_RESPONSE_EVENT = "geocoding-response"

# Opaque upstream result, passed through without validation. Usually an object like
# {"display_name": ..., "confidence": [...], "boundingboxes": [...], "levels_polygons": [...]}
GeocodeResult = Any


class GeocodeRequest(BaseModel):
    """Body of POST /geocode and payload of the geocoding-request event.

    Both fields are optional at parse level; a missing text is reported as
    the domain validation error rather than a schema error.
    """

    text: str | None = None
    k: str | int | None = Field(default=None, description="Result-count hint")


class GeocodeQuery(BaseModel):
    """Validated query handed to the translator."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    k: str | int | None = None


class GeocodeResponse(BaseModel):
    """Normalized envelope: results on success, message on error."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success", "error"]
    results: list[GeocodeResult] | None = None
    message: str | None = None

    @model_validator(mode="after")
    def check_status_payload(self) -> GeocodeResponse:
        if self.status == "success":
            if self.results is None or self.message is not None:
                raise ValueError("success envelope requires results and no message")
        elif self.message is None or self.results is not None:
            raise ValueError("error envelope requires a message and no results")
        return self

    @classmethod
    def success(cls, results: list[GeocodeResult]) -> GeocodeResponse:
        return cls(status="success", results=results)

    @classmethod
    def error(cls, message: str) -> GeocodeResponse:
        return cls(status="error", message=message)

    def to_payload(self) -> dict[str, Any]:
        """Wire form shared by both transports; absent fields are omitted.

        Results are inserted as-is so upstream objects keep their null members.
        """
        payload: dict[str, Any] = {"status": self.status}
        if self.results is not None:
            payload["results"] = self.results
        if self.message is not None:
            payload["message"] = self.message
        return payload


class RealtimeMessage(BaseModel):
    """A named event frame exchanged over the WebSocket transport."""

    event: str
    data: Any = None
