"""Health check endpoints — used by load balancers and uptime monitoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from brewery_directory import __version__
from brewery_directory.database import check_db_connectivity
from brewery_directory.dependencies import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness probe — returns 200 if the process is running."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready(services: Services = Depends(get_services)) -> JSONResponse:
    """
    Readiness probe — checks public DB connectivity and reports whether the
    admin client is configured. Returns 503 when the database is unreachable;
    a missing admin client is reported but does not fail readiness.
    """
    status: dict[str, str] = {}
    all_ok = True

    if services.clients is not None:
        db_ok = await check_db_connectivity(services.clients.public)
        status["db"] = "ok" if db_ok else "error"
        all_ok = db_ok
    else:
        status["db"] = "external"

    status["admin"] = "ok" if services.directory.can_write else "disabled"

    return JSONResponse(content=status, status_code=200 if all_ok else 503)
