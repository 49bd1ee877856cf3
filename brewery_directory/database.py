"""Async SQLAlchemy engines, store clients, and Base declaration.

Two clients are built explicitly at startup: a public one for reads and an
optional privileged one for writes. Nothing here is a module-level singleton,
so tests can hand in their own stores.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from brewery_directory.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
    pass


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo)
    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


@dataclass
class DirectoryClients:
    """The public engine and, when credentials are configured, the admin engine."""

    public: AsyncEngine
    admin: Optional[AsyncEngine] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "DirectoryClients":
        echo = settings.app_env == "development" and settings.log_level.upper() == "DEBUG"
        public = build_engine(settings.database_url, echo=echo)
        admin = None
        if settings.admin_database_url:
            admin = build_engine(settings.admin_database_url, echo=echo)
        else:
            logger.warning("ADMIN_DATABASE_URL not set; write operations are disabled.")
        return cls(public=public, admin=admin)

    async def dispose(self) -> None:
        await self.public.dispose()
        if self.admin is not None:
            await self.admin.dispose()


async def check_db_connectivity(engine: AsyncEngine) -> bool:
    """Return True if a simple SELECT 1 succeeds."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.warning("Connectivity check failed: %s", exc)
        return False


async def create_all(engine: AsyncEngine) -> None:
    """Create every table registered on ``Base`` (IF NOT EXISTS)."""
    from brewery_directory import models  # noqa: F401  registers tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
