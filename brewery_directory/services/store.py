"""
Store adapter — the capabilities the directory core needs from its backend.

``DirectoryStore`` is the seam: the access layer only ever sees plain dict
rows (storage shape). ``SqlAlchemyStore`` implements it over an async engine,
opening a fresh session per call so no state is shared between requests.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional, Protocol, Sequence

from sqlalchemy import Table, func, select, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from brewery_directory import models  # noqa: F401  registers tables on Base.metadata
from brewery_directory.database import Base
from brewery_directory.errors import CapabilityUnavailable

logger = logging.getLogger(__name__)

Row = dict[str, Any]
# (column, descending)
OrderBy = Sequence[tuple[str, bool]]

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DirectoryStore(Protocol):
    """Backend capabilities consumed by the directory core."""

    async def select_eq(
        self, table: str, column: str, value: Any, limit: Optional[int] = None
    ) -> list[Row]:
        """Rows whose ``column`` equals ``value``, at most ``limit`` of them."""
        ...

    async def select_one(self, table: str, column: str, value: Any) -> Optional[Row]:
        """The single row whose ``column`` equals ``value``, or None."""
        ...

    async def select_all(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: OrderBy = (),
    ) -> list[Row]:
        """Every row matching the exact-match ``filters``."""
        ...

    async def upsert(
        self,
        table: str,
        record: Mapping[str, Any],
        on_conflict: Sequence[str],
        preserve: Sequence[str] = (),
    ) -> Optional[Row]:
        """
        Insert ``record`` or replace the row matching ``on_conflict``.
        Columns in ``preserve`` keep their stored value once set.
        Returns the row as written.
        """
        ...

    async def rpc(self, name: str, params: Mapping[str, Any]) -> list[Row]:
        """Call a server-side function; raises CapabilityUnavailable if it is missing."""
        ...


class SqlAlchemyStore:
    """``DirectoryStore`` backed by an async SQLAlchemy engine (Postgres or SQLite)."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions = async_sessionmaker(bind=engine, expire_on_commit=False)

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    def _table(self, name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise ValueError(f"Unknown table: {name}") from None

    async def select_eq(
        self, table: str, column: str, value: Any, limit: Optional[int] = None
    ) -> list[Row]:
        t = self._table(table)
        stmt = select(t).where(t.c[column] == value)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._sessions() as session:
            result = await session.execute(stmt)
            return [dict(r) for r in result.mappings().all()]

    async def select_one(self, table: str, column: str, value: Any) -> Optional[Row]:
        rows = await self.select_eq(table, column, value, limit=2)
        if len(rows) > 1:
            logger.warning("%s.%s=%r matched more than one row", table, column, value)
        return rows[0] if rows else None

    async def select_all(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: OrderBy = (),
    ) -> list[Row]:
        t = self._table(table)
        stmt = select(t)
        for column, value in (filters or {}).items():
            stmt = stmt.where(t.c[column] == value)
        for column, descending in order_by:
            col = t.c[column]
            stmt = stmt.order_by(col.desc().nulls_last() if descending else col.asc().nulls_last())
        async with self._sessions() as session:
            result = await session.execute(stmt)
            return [dict(r) for r in result.mappings().all()]

    async def upsert(
        self,
        table: str,
        record: Mapping[str, Any],
        on_conflict: Sequence[str],
        preserve: Sequence[str] = (),
    ) -> Optional[Row]:
        t = self._table(table)
        insert = _INSERTS.get(self.dialect)
        if insert is None:
            raise NotImplementedError(f"Upsert is not supported on {self.dialect}")

        values = {k: v for k, v in record.items() if k in t.c}
        stmt = insert(t).values(**values)
        immutable = set(on_conflict) | {c.name for c in t.primary_key.columns}
        update_cols: dict[str, Any] = {}
        for name in values:
            if name in immutable:
                continue
            if name in preserve:
                update_cols[name] = func.coalesce(t.c[name], stmt.excluded[name])
            else:
                update_cols[name] = stmt.excluded[name]
        stmt = stmt.on_conflict_do_update(
            index_elements=list(on_conflict),
            set_=update_cols,
        ).returning(*t.c)

        async with self._sessions() as session:
            try:
                result = await session.execute(stmt)
                row = result.mappings().first()
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        return dict(row) if row is not None else None

    async def rpc(self, name: str, params: Mapping[str, Any]) -> list[Row]:
        if not _IDENTIFIER_RE.match(name):
            raise ValueError(f"Invalid function name: {name!r}")
        placeholders = ", ".join(f":{k}" for k in params)
        stmt = text(f"SELECT * FROM {name}({placeholders})")
        try:
            async with self._sessions() as session:
                result = await session.execute(stmt, dict(params))
                return [dict(r) for r in result.mappings().all()]
        except SQLAlchemyError as exc:
            raise CapabilityUnavailable(f"{name}: {exc}") from exc
