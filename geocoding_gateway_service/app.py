"""Geocoding Gateway Service - HTTP and WebSocket front for the geocoding service.

Both transports funnel into the same request translator, so a query gets the
same envelope whichever way it arrives.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geocoding_gateway_service.config import Settings, settings
from geocoding_gateway_service.di import GeocodingGatewayProvider
from geocoding_gateway_service.error_handling.fastapi import register_error_handlers
from geocoding_gateway_service.logging_utils import (
    configure_service_logging,
    create_service_logger,
)
from geocoding_gateway_service.middleware import CorrelationIDMiddleware
from geocoding_gateway_service.routers import geocode_routes, health_routes, websocket_routes

configure_service_logging(
    settings.SERVICE_NAME,
    environment=settings.ENVIRONMENT.value,
    log_level=settings.LOG_LEVEL,
)
logger = create_service_logger("gateway.main")


def log_unhandled_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Event loop exception handler: log and keep serving."""
    exc = context.get("exception")
    logger.error(
        "Unhandled exception in background task",
        message=context.get("message"),
        exc_info=exc,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    config: Settings = app.state.settings
    asyncio.get_running_loop().set_exception_handler(log_unhandled_exception)
    logger.info(
        "Geocoding Gateway Service started",
        port=config.PORT,
        geocoding_service_url=config.GEOCODING_SERVICE_URL,
    )

    yield

    logger.info("Shutting down Geocoding Gateway Service...")
    if app.state.owns_container:
        await app.state.di_container.close()


def create_app(
    config: Settings = settings,
    container: AsyncContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=config.SERVICE_NAME,
        version="1.0.0",
        description="Gateway exposing the geocoding service over HTTP and WebSocket",
        lifespan=lifespan,
    )
    app.state.settings = config

    register_error_handlers(app)

    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=config.CORS_ALLOW_METHODS,
        allow_headers=config.CORS_ALLOW_HEADERS,
    )

    app.include_router(health_routes.router, tags=["Health"])
    app.include_router(geocode_routes.router, tags=["Geocoding"])
    app.include_router(websocket_routes.router, tags=["WebSocket"])

    app.state.owns_container = container is None
    if container is None:
        container = make_async_container(GeocodingGatewayProvider())
    setup_dishka(container, app)
    app.state.di_container = container

    return app


def main() -> None:
    import uvicorn

    uvicorn.run(
        "geocoding_gateway_service.app:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


app = create_app()


if __name__ == "__main__":
    main()
