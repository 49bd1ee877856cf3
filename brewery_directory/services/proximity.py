"""
Proximity resolver — nearest listings to a point.

Flow:
  1. Ask the store's server-side function (PostGIS) for candidates within the
     radius, annotated with ``distance_meters``.
  2. If that call fails or the function does not exist, fetch every
     (optionally type-filtered) row and filter with Haversine.
  3. Sort ascending by distance (stable: equal distances keep source order),
     map row by row (invalid rows are skipped), truncate to ``limit``.

Any unexpected failure degrades to an empty result. One resolver serves one
table: attractions by default, breweries via ``mapper=BREWERIES``.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Optional

from brewery_directory.services.geo import (
    METERS_PER_MILE,
    haversine_miles,
    km_to_miles,
    meters_to_miles,
)
from brewery_directory.services.mapper import ATTRACTIONS, M, RecordMapper
from brewery_directory.services.store import DirectoryStore, Row

logger = logging.getLogger(__name__)


class ProximityResolver(Generic[M]):
    """
    Nearest-neighbour search with a server-side fast path and a client-side fallback.

    With ``cache_probe=True`` the first failed server-side call marks the
    capability as unavailable for the lifetime of the resolver; otherwise
    every call tries the server first. ``type_param`` names the server
    function's optional type argument; None means the function takes none.
    """

    def __init__(
        self,
        store: DirectoryStore,
        *,
        table: str = "attractions",
        rpc_name: str = "get_nearby_attractions",
        mapper: RecordMapper[M] = ATTRACTIONS,
        type_param: Optional[str] = "attraction_type",
        cache_probe: bool = False,
    ) -> None:
        self._store = store
        self._table = table
        self._rpc_name = rpc_name
        self._mapper = mapper
        self._type_param = type_param
        self._cache_probe = cache_probe
        self._rpc_available: Optional[bool] = None

    @property
    def rpc_available(self) -> Optional[bool]:
        """Cached probe result; None until probed (or when probing is not cached)."""
        return self._rpc_available

    async def nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: float = 5.0,
        limit: Optional[int] = 10,
        kind: Optional[str] = None,
    ) -> list[M]:
        """Return up to ``limit`` rows within ``radius_km``, nearest first."""
        return await self._resolve(
            latitude, longitude, km_to_miles(radius_km), radius_km * 1000, limit, kind
        )

    async def nearby_miles(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float = 10.0,
        limit: Optional[int] = None,
        kind: Optional[str] = None,
    ) -> list[M]:
        """``nearby`` with the radius given in miles; ``limit=None`` returns every match."""
        return await self._resolve(
            latitude, longitude, radius_miles, radius_miles * METERS_PER_MILE, limit, kind
        )

    async def _resolve(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float,
        radius_meters: float,
        limit: Optional[int],
        kind: Optional[str],
    ) -> list[M]:
        try:
            if limit is not None and limit <= 0:
                return []
            rows = await self._server_side(latitude, longitude, radius_meters, kind)
            if rows is not None:
                return self._rank_server_rows(rows, radius_meters, limit)
            return await self._client_side(latitude, longitude, radius_miles, limit, kind)
        except Exception:
            logger.exception(
                "Error fetching nearby %s (lat=%s, lng=%s, radius_miles=%.3f)",
                self._table, latitude, longitude, radius_miles,
            )
            return []

    async def _server_side(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float,
        kind: Optional[str],
    ) -> Optional[list[Row]]:
        """Return server candidates, or None when the fallback must run."""
        if self._rpc_available is False:
            return None
        params: dict[str, Any] = {
            "lat": latitude,
            "lng": longitude,
            "radius_meters": radius_meters,
        }
        if self._type_param:
            params[self._type_param] = kind or None
        try:
            rows = await self._store.rpc(self._rpc_name, params)
        except Exception as exc:
            logger.warning(
                "Server-side %s unavailable, filtering client-side: %s", self._rpc_name, exc
            )
            if self._cache_probe:
                self._rpc_available = False
            return None
        if self._cache_probe:
            self._rpc_available = True
        return rows or []

    def _rank_server_rows(
        self, rows: list[Row], radius_meters: float, limit: Optional[int]
    ) -> list[M]:
        ranked: list[tuple[float, Row]] = []
        for row in rows:
            meters = row.get("distance_meters")
            if meters is not None and meters > radius_meters:
                continue
            ranked.append((meters_to_miles(meters) if meters else 0.0, row))
        ranked.sort(key=lambda t: t[0])
        return self._mapper.map_rows((row for _, row in ranked), limit)

    async def _client_side(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float,
        limit: Optional[int],
        kind: Optional[str],
    ) -> list[M]:
        filters = {"type": kind} if kind else None
        rows = await self._store.select_all(self._table, filters=filters)
        if not rows:
            return []

        ranked: list[tuple[float, Row]] = []
        for row in rows:
            lat, lng = row.get("latitude"), row.get("longitude")
            if lat is None or lng is None:
                continue
            distance = haversine_miles(latitude, longitude, lat, lng)
            if distance <= radius_miles:
                ranked.append((distance, row))
        ranked.sort(key=lambda t: t[0])
        return self._mapper.map_rows((row for _, row in ranked), limit)
