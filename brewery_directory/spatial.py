"""
PostGIS support: the server-side nearby-search functions.

Each function returns every column of its table plus ``distance_meters``,
restricted to rows within ``radius_meters`` and ordered nearest first. The
column list and types come from the ORM table, so the function always
matches the table it reads. PostgreSQL only; other dialects have no
equivalent and fall back to client-side filtering.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncEngine

from brewery_directory.config import Settings
from brewery_directory.database import Base

logger = logging.getLogger(__name__)

_PG = postgresql.dialect()


def nearby_function_ddl(
    table: Table,
    function_name: str,
    type_column: Optional[str] = None,
    type_param: Optional[str] = None,
) -> str:
    """``CREATE OR REPLACE FUNCTION`` for a nearby search over ``table``."""
    quote = _PG.identifier_preparer.quote
    params = [
        "lat DOUBLE PRECISION",
        "lng DOUBLE PRECISION",
        "radius_meters DOUBLE PRECISION",
    ]
    type_clause = ""
    if type_column and type_param:
        params.append(f"{type_param} TEXT DEFAULT NULL")
        type_clause = f"\n    AND ({type_param} IS NULL OR t.{quote(type_column)} = {type_param})"

    returns = ",\n  ".join(
        f"{quote(c.name)} {c.type.compile(dialect=_PG)}" for c in table.columns
    )
    selected = ", ".join(f"t.{quote(c.name)}" for c in table.columns)
    point = "ST_MakePoint(t.longitude, t.latitude)::geography"
    origin = "ST_MakePoint(lng, lat)::geography"

    return (
        f"CREATE OR REPLACE FUNCTION {quote(function_name)}(\n  "
        + ",\n  ".join(params)
        + f"\n)\nRETURNS TABLE (\n  {returns},\n  distance_meters DOUBLE PRECISION\n)\n"
        "LANGUAGE sql\n"
        "STABLE\n"
        "AS $$\n"
        f"  SELECT {selected},\n"
        f"    ST_Distance({point}, {origin}) AS distance_meters\n"
        f"  FROM {quote(table.name)} t\n"
        "  WHERE t.latitude IS NOT NULL AND t.longitude IS NOT NULL\n"
        f"    AND ST_DWithin({point}, {origin}, radius_meters)"
        f"{type_clause}\n"
        "  ORDER BY distance_meters\n"
        "$$"
    )


def nearby_functions(settings: Settings) -> list[str]:
    """DDL for the attraction and brewery nearby functions, per ``settings``."""
    from brewery_directory import models  # noqa: F401  registers tables on Base.metadata

    tables = Base.metadata.tables
    return [
        nearby_function_ddl(
            tables[settings.attractions_table],
            settings.nearby_rpc_name,
            type_column="type",
            type_param="attraction_type",
        ),
        nearby_function_ddl(
            tables[settings.breweries_table],
            settings.nearby_breweries_rpc_name,
        ),
    ]


async def create_spatial_functions(engine: AsyncEngine, settings: Settings) -> bool:
    """
    Enable PostGIS and (re)create the nearby functions.
    Returns False without touching the database on non-PostgreSQL engines.
    """
    if engine.dialect.name != "postgresql":
        logger.info("Skipping PostGIS functions on %s", engine.dialect.name)
        return False
    async with engine.begin() as conn:
        await conn.exec_driver_sql("CREATE EXTENSION IF NOT EXISTS postgis")
        for ddl in nearby_functions(settings):
            await conn.exec_driver_sql(ddl)
    return True
