"""Vehicle Relay API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map VehicleRelayError → structured JSON responses
    - CORS permissive (all origins/methods/headers) unless CORS_ORIGINS narrows it
    - Registry client created on startup and closed on shutdown via lifespan
    - Static SPA mounted AFTER API routes so /api/* takes precedence

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Settings read inside create_app(): a missing RAPIDAPI_KEY fails at startup
      with ConfigurationError, not on the first request
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from vehicle_relay import __version__
from vehicle_relay.api.error_handlers import register_error_handlers
from vehicle_relay.api.routes import health, vehicle_info
from vehicle_relay.config import Settings, get_settings
from vehicle_relay.infrastructure.observability import setup_logging
from vehicle_relay.infrastructure.registry_client import (
    close_registry_client, init_registry_client,
)

logger = logging.getLogger(__name__)


def _lifespan_for(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        init_registry_client(
            api_key=settings.rapidapi_key,
            api_host=settings.rapidapi_host,
            base_url=settings.upstream_url,
            timeout_seconds=settings.upstream_timeout_seconds,
            max_retries=settings.upstream_max_retries,
            retry_delay_seconds=settings.upstream_retry_delay_seconds,
        )
        logger.info("Vehicle Relay API started")
        yield
        await close_registry_client()
        logger.info("Vehicle Relay API shutting down")

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = get_settings()
    app = FastAPI(
        title="Vehicle Relay API",
        version=__version__,
        lifespan=_lifespan_for(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(vehicle_info.router)

    # html=True serves index.html as the default document
    if os.path.isdir(settings.static_dir):
        app.mount(
            "/", StaticFiles(directory=settings.static_dir, html=True),
            name="static",
        )

    return app


app = create_app()
