"""
Brewery access layer — lookups, search, proximity and navigation indexes.

Same contract as the attraction reads: failures are logged and become an
empty list or None, and invalid rows are skipped one at a time. Lookups by
id or slug attach the brewery's beers; a failed beer read leaves the list
empty rather than hiding the brewery.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from brewery_directory.schemas.attraction import FacetCount
from brewery_directory.schemas.brewery import DEFAULT_BREWERY_TYPE, Beer, Brewery, BreweryFacets
from brewery_directory.services.directory import count_facets, facet_values, run_read
from brewery_directory.services.mapper import BREWERIES
from brewery_directory.services.proximity import ProximityResolver
from brewery_directory.services.store import DirectoryStore, Row

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 50
# Row fields a free-text search looks at.
SEARCH_FIELDS = ("name", "city", "county", "description")


def _key(value: Any) -> str:
    return str(value or "").strip().lower()


def _labels(row: Mapping[str, Any], column: str) -> list[str]:
    labels = facet_values(row.get(column))
    if column == "type" and not labels:
        return [DEFAULT_BREWERY_TYPE]
    return labels


def _matches(row: Mapping[str, Any], column: str, key: str) -> bool:
    return any(_key(label) == key for label in _labels(row, column))


def _search_hit(row: Mapping[str, Any], term: str) -> bool:
    if any(term in _key(row.get(f)) for f in SEARCH_FIELDS):
        return True
    return any(term in _key(a) for a in facet_values(row.get("amenities")))


class BreweryService:
    """Read access to breweries and their beers."""

    def __init__(
        self,
        store: DirectoryStore,
        *,
        proximity: Optional[ProximityResolver[Brewery]] = None,
        table: str = "breweries",
        beers_table: str = "beers",
    ) -> None:
        self._store = store
        self._table = table
        self._beers_table = beers_table
        self.proximity = proximity or ProximityResolver(
            store,
            table=table,
            rpc_name="get_nearby_breweries",
            mapper=BREWERIES,
            type_param=None,
        )

    # ── Lookups ──────────────────────────────────────────────────────────────

    async def _beers(self, brewery_id: str) -> list[Beer]:
        async def fetch() -> list[Beer]:
            rows = await self._store.select_eq(self._beers_table, "brewery_id", brewery_id)
            return [Beer.model_validate(r) for r in rows]

        return (await run_read(f"fetching beers for brewery {brewery_id!r}", fetch)).unwrap_or([])

    async def _one_by(self, column: str, value: str) -> Optional[Brewery]:
        async def fetch() -> Optional[Row]:
            return await self._store.select_one(self._table, column, value)

        row = (await run_read(f"fetching brewery by {column}={value!r}", fetch)).unwrap_or(None)
        if not row:
            return None
        return BREWERIES.try_map(row, beers=await self._beers(str(row["id"])))

    async def get_brewery_by_id(self, brewery_id: str) -> Optional[Brewery]:
        return await self._one_by("id", brewery_id)

    async def get_brewery_by_slug(self, slug: str) -> Optional[Brewery]:
        return await self._one_by("slug", slug)

    # ── Listings ─────────────────────────────────────────────────────────────

    async def _all_rows(self) -> list[Row]:
        async def fetch() -> list[Row]:
            return await self._store.select_all(self._table, order_by=[("name", False)])

        return (await run_read("fetching all breweries", fetch)).unwrap_or([])

    async def _list_matching(self, column: str, value: str) -> list[Brewery]:
        key = _key(value)
        rows = [r for r in await self._all_rows() if _matches(r, column, key)]
        return BREWERIES.map_rows(rows)

    async def get_breweries_by_city(self, city: str) -> list[Brewery]:
        """Case-insensitive city match, ordered by name."""
        return await self._list_matching("city", city)

    async def get_breweries_by_county(self, county: str) -> list[Brewery]:
        return await self._list_matching("county", county)

    async def get_breweries_by_type(self, brewery_type: str) -> list[Brewery]:
        """Breweries carrying ``brewery_type`` among their type labels."""
        return await self._list_matching("type", brewery_type)

    async def get_breweries_by_amenity(self, amenity: str) -> list[Brewery]:
        return await self._list_matching("amenities", amenity)

    async def search_breweries(self, query: str, limit: int = MAX_SEARCH_RESULTS) -> list[Brewery]:
        """
        Case-insensitive substring search over name, city, county, description
        and amenities. A blank query lists every brewery. At most ``limit``
        results, clamped to [1, 50].
        """
        limit = max(1, min(limit, MAX_SEARCH_RESULTS))
        term = _key(query)
        rows = await self._all_rows()
        if term:
            rows = [r for r in rows if _search_hit(r, term)]
        return BREWERIES.map_rows(rows, limit)

    async def get_nearby_breweries(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float = 10.0,
        limit: Optional[int] = None,
    ) -> list[Brewery]:
        """Breweries within ``radius_miles``, nearest first; see ``ProximityResolver``."""
        return await self.proximity.nearby_miles(latitude, longitude, radius_miles, limit)

    # ── Indexes ──────────────────────────────────────────────────────────────

    async def _counts(self, column: str) -> list[FacetCount]:
        async def fetch() -> list[FacetCount]:
            rows = await self._store.select_all(self._table)
            return count_facets(({column: _labels(r, column)} for r in rows), column)

        return (await run_read(f"counting breweries by {column}", fetch)).unwrap_or([])

    async def list_cities(self) -> list[FacetCount]:
        return await self._counts("city")

    async def list_counties(self) -> list[FacetCount]:
        return await self._counts("county")

    async def list_types(self) -> list[FacetCount]:
        return await self._counts("type")

    async def list_amenities(self) -> list[FacetCount]:
        return await self._counts("amenities")

    async def get_facets(self) -> BreweryFacets:
        """Build the four brewery indexes concurrently."""
        cities, counties, types, amenities = await asyncio.gather(
            self.list_cities(), self.list_counties(), self.list_types(), self.list_amenities()
        )
        return BreweryFacets(cities=cities, counties=counties, types=types, amenities=amenities)
