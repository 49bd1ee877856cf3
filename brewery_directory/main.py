"""
Brewery directory — FastAPI application entry point.
Lifespan: build store clients → verify connectivity → wire services.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from brewery_directory import __version__
from brewery_directory.config import Settings, get_settings
from brewery_directory.database import DirectoryClients, check_db_connectivity
from brewery_directory.dependencies import Services
from brewery_directory.routers import articles, attractions, breweries, health, reviews

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """
    Build the application. Pass ``services`` to run against pre-built stores
    (tests); otherwise engines are created from ``settings`` at startup.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting brewery directory (env=%s)", settings.app_env)

        if services is not None:
            app.state.services = services
            yield
            return

        clients = DirectoryClients.from_settings(settings)
        if await check_db_connectivity(clients.public):
            logger.info("Database connectivity verified.")
        else:
            logger.error("Database connectivity check FAILED at startup.")
        app.state.services = Services.from_clients(settings, clients)

        yield

        logger.info("Shutting down brewery directory.")
        await clients.dispose()

    app = FastAPI(
        title="Brewery Directory",
        description="Brewery and attraction lookups, proximity search, reviews and news for the brewery directory.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ──────────────────────────────────────────────────────────────

    app.include_router(health.router)
    app.include_router(attractions.router)
    app.include_router(breweries.router)
    app.include_router(reviews.router)
    app.include_router(articles.router)

    # ── Global exception handler ─────────────────────────────────────────────

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return a machine-readable error for any unhandled exception."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "code": "DIRECTORY_UNAVAILABLE"},
        )

    return app


app = create_app()
