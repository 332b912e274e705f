"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from registry_fetcher.infrastructure.config import get_settings
from registry_fetcher.interface import dependencies
from registry_fetcher.interface.error_handlers import register_error_handlers
from registry_fetcher.interface.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    await dependencies.startup()
    logger.info("Serving registry from %s", get_settings().repo.full_name)
    try:
        yield
    finally:
        await dependencies.shutdown()


def create_app() -> FastAPI:
    """Build the application; shared clients are created by the lifespan."""
    app = FastAPI(
        title="Component Registry Fetcher",
        version="1.0.0",
        description=(
            "Retrieves UI component sources, demos, metadata and prebuilt "
            "blocks from a GitHub-hosted component registry."
        ),
        lifespan=_lifespan,
    )
    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
