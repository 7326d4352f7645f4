"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leadsift import __version__
from leadsift.adapters.base.adapter import SearchAdapter
from leadsift.api.deps import set_engine
from leadsift.api.errors import lead_search_exception_handler, unhandled_exception_handler
from leadsift.api.v1.router import router as v1_router
from leadsift.config.settings import Settings
from leadsift.core.engine import LeadSearchEngine
from leadsift.core.exceptions import LeadSearchError
from leadsift.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, adapter: SearchAdapter | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        adapter: Search adapter to use instead of one built from settings.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # Explicit LEADSIFT_CONFIG (set by the CLI), else leadsift-config.yaml if present
        yaml_path = Path(os.environ.get("LEADSIFT_CONFIG", "leadsift-config.yaml"))
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    setup_logging(settings.observability)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting LeadSift v%s", __version__)

        engine = LeadSearchEngine(settings, adapter=adapter)
        await engine.initialize()
        set_engine(engine)

        app.state.settings = settings
        app.state.engine = engine

        logger.info("LeadSift is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down LeadSift...")
        await engine.shutdown()
        set_engine(None)
        logger.info("LeadSift shutdown complete")

    app = FastAPI(
        title="LeadSift",
        description="Filterable B2B lead search over OpenSearch indices.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LeadSearchError, lead_search_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(v1_router, prefix="/v1")

    return app
