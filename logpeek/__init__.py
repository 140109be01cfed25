"""logpeek log aggregation server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .api import api_router
from .core.app_config import ServerConfig, load_server_config
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .services.query import QueryEngine
from .services.store import LogStore
from .services.telemetry import HostTelemetry


def create_app(
    settings: Settings | None = None,
    config: ServerConfig | None = None,
    telemetry: HostTelemetry | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or default_settings
    if configure_logging:
        setup_logging(settings.service_name, settings.log_level)
    logger = logging.getLogger(__name__)

    config = config or load_server_config(settings.config_path, settings)
    telemetry = telemetry or HostTelemetry()
    store = LogStore(config, available_memory=telemetry.available_memory)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Loading logs for %d application(s)", len(config.applications))
        store.load_initial()
        yield

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    app.state.query_engine = QueryEngine(store)
    app.state.telemetry = telemetry
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Provide a friendly landing response for the bare hostname."""

        return {
            "message": (
                "logpeek API is online. Try GET "
                f"{settings.api_prefix}/health for a health check."
            )
        }

    return app


__all__ = ["create_app"]
