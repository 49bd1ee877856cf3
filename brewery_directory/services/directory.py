"""
Directory access layer — typed reads and the privileged upsert for attractions.

Reads never raise past this layer: each runs through ``run_read`` which captures
failures as a ``ReadResult`` error, and the public method adapts that to an
empty list or None. ``upsert_attraction`` is the exception: a missing admin
client or a rejected write is raised to the caller.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, TypeVar

from brewery_directory.errors import (
    AdminClientUnavailable,
    ReadError,
    ReadResult,
    WriteError,
)
from brewery_directory.schemas.attraction import Attraction, DirectoryFacets, FacetCount
from brewery_directory.services.mapper import ATTRACTIONS, to_application_shape, to_storage_shape
from brewery_directory.services.proximity import ProximityResolver
from brewery_directory.services.store import DirectoryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Columns that keep their first stored value across upserts.
IMMUTABLE_ONCE_SET = ("created_at", "last_updated")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def run_read(operation: str, fn: Callable[[], Awaitable[T]]) -> ReadResult[T]:
    """Await ``fn`` and capture any failure as a ``ReadError``."""
    try:
        return ReadResult(value=await fn())
    except Exception as exc:
        logger.error("Error %s: %s", operation, exc)
        return ReadResult(error=ReadError(operation, exc))


def facet_values(value: Any) -> list[str]:
    """A column value as facet labels: lists contribute each item, JSON text is parsed."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        if value.startswith("["):
            try:
                value = json.loads(value)
            except ValueError:
                return [value]
        else:
            return [value]
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v]
    return [str(value)]


def count_facets(rows: Iterable[Mapping[str, Any]], column: str) -> list[FacetCount]:
    """Count distinct labels in ``column``, most common first, ties alphabetical."""
    counts = Counter(label for r in rows for label in facet_values(r.get(column)))
    ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [FacetCount(value=v, count=n) for v, n in ordered]


class DirectoryService:
    """Read/write access to directory attractions."""

    def __init__(
        self,
        store: DirectoryStore,
        admin_store: Optional[DirectoryStore] = None,
        *,
        proximity: Optional[ProximityResolver] = None,
        table: str = "attractions",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._admin_store = admin_store
        self._table = table
        self._clock = clock
        self.proximity = proximity or ProximityResolver(store, table=table)

    @property
    def can_write(self) -> bool:
        return self._admin_store is not None

    # ── Reads ────────────────────────────────────────────────────────────────

    async def get_attractions_near_brewery(
        self,
        latitude: float,
        longitude: float,
        radius_km: float = 5.0,
        limit: int = 10,
        attraction_type: Optional[str] = None,
    ) -> list[Attraction]:
        """Nearest attractions to a brewery; see ``ProximityResolver.nearby``."""
        return await self.proximity.nearby(latitude, longitude, radius_km, limit, attraction_type)

    async def _list_by(self, column: str, value: str, limit: int) -> ReadResult[list[Attraction]]:
        async def fetch() -> list[Attraction]:
            if limit <= 0:
                return []
            rows = await self._store.select_eq(self._table, column, value, limit=limit)
            return ATTRACTIONS.map_rows(rows, limit)

        return await run_read(f"fetching attractions by {column}={value!r}", fetch)

    async def _one_by(self, column: str, value: str) -> ReadResult[Optional[Attraction]]:
        async def fetch() -> Optional[Attraction]:
            row = await self._store.select_one(self._table, column, value)
            return ATTRACTIONS.try_map(row) if row else None

        return await run_read(f"fetching attraction by {column}={value!r}", fetch)

    async def get_attractions_by_city(self, city: str, limit: int = 50) -> list[Attraction]:
        return (await self._list_by("city", city, limit)).unwrap_or([])

    async def get_attractions_by_type(self, attraction_type: str, limit: int = 50) -> list[Attraction]:
        return (await self._list_by("type", attraction_type, limit)).unwrap_or([])

    async def get_attraction_by_slug(self, slug: str) -> Optional[Attraction]:
        return (await self._one_by("slug", slug)).unwrap_or(None)

    async def get_attraction_by_place_id(self, place_id: str) -> Optional[Attraction]:
        return (await self._one_by("place_id", place_id)).unwrap_or(None)

    async def _counts(self, column: str) -> ReadResult[list[FacetCount]]:
        async def fetch() -> list[FacetCount]:
            return count_facets(await self._store.select_all(self._table), column)

        return await run_read(f"counting attractions by {column}", fetch)

    async def list_cities(self) -> list[FacetCount]:
        return (await self._counts("city")).unwrap_or([])

    async def list_counties(self) -> list[FacetCount]:
        return (await self._counts("county")).unwrap_or([])

    async def list_types(self) -> list[FacetCount]:
        return (await self._counts("type")).unwrap_or([])

    async def list_amenities(self) -> list[FacetCount]:
        return (await self._counts("amenities")).unwrap_or([])

    async def get_facets(self) -> DirectoryFacets:
        """Build the city, county, type and amenity indexes concurrently."""
        cities, counties, types, amenities = await asyncio.gather(
            self.list_cities(), self.list_counties(), self.list_types(), self.list_amenities()
        )
        return DirectoryFacets(cities=cities, counties=counties, types=types, amenities=amenities)

    # ── Writes ───────────────────────────────────────────────────────────────

    async def upsert_attraction(self, attraction: Attraction) -> Optional[Attraction]:
        """
        Insert or replace an attraction, keyed on ``place_id`` (``slug`` when
        the attraction has no external id).

        Raises AdminClientUnavailable before touching the store when no admin
        client is configured, and WriteError when the store rejects the write.
        """
        if self._admin_store is None:
            raise AdminClientUnavailable("Admin store client not available")

        record = to_storage_shape(attraction)
        now = self._clock()
        record["updated_at"] = now
        if not record.get("id"):
            record.pop("id", None)
            record["created_at"] = now
        elif record.get("created_at") is None:
            record.pop("created_at")
        conflict_key = ("place_id",) if attraction.place_id else ("slug",)

        try:
            row = await self._admin_store.upsert(
                self._table,
                record,
                on_conflict=conflict_key,
                preserve=IMMUTABLE_ONCE_SET,
            )
        except Exception as exc:
            logger.error("Error upserting attraction %s: %s", attraction.place_id or attraction.slug, exc)
            raise WriteError(f"Upsert of {attraction.slug!r} failed: {exc}") from exc

        if not row:
            return None
        return to_application_shape(row)
