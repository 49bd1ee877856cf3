"""Shared fixtures: an in-memory DirectoryStore and row builders."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

import pytest

from brewery_directory.errors import CapabilityUnavailable

# Downtown Baltimore
ORIGIN = (39.29, -76.61)
# Miles per degree of latitude on a 3959-mile sphere
MILES_PER_DEGREE_LAT = 69.0976


def north_of(origin: tuple[float, float], miles: float) -> tuple[float, float]:
    return origin[0] + miles / MILES_PER_DEGREE_LAT, origin[1]


def attraction_row(**overrides: Any) -> dict[str, Any]:
    """A storage-shaped attraction row."""
    name = overrides.pop("name", "Fort McHenry")
    row: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "place_id": f"place-{uuid.uuid4().hex[:8]}",
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "type": "landmark",
        "google_types": None,
        "amenities": None,
        "street": "2400 E Fort Ave",
        "city": "Baltimore",
        "state": "MD",
        "zip": "21230",
        "county": "Baltimore City",
        "latitude": ORIGIN[0],
        "longitude": ORIGIN[1],
        "description": None,
        "phone": None,
        "website": None,
        "rating": 4.7,
        "rating_count": 1200,
        "price_level": None,
        "hours": None,
        "photos": None,
        "last_updated": None,
        "created_at": None,
        "updated_at": None,
    }
    row.update(overrides)
    return row


def brewery_row(**overrides: Any) -> dict[str, Any]:
    """A storage-shaped brewery row."""
    name = overrides.pop("name", "Union Craft Brewing")
    row: dict[str, Any] = {
        "id": overrides.pop("id", name.lower().replace(" ", "-")),
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "description": None,
        "type": ["Microbrewery"],
        "street": "1700 W 41st St",
        "city": "Baltimore",
        "state": "MD",
        "zip": "21211",
        "county": "Baltimore City",
        "latitude": ORIGIN[0],
        "longitude": ORIGIN[1],
        "social_media": None,
        "hours": None,
        "amenities": None,
        "allows_visitors": None,
        "dog_friendly": None,
        "memberships": None,
    }
    row.update(overrides)
    return row


class FakeStore:
    """In-memory ``DirectoryStore``; ``rpc_handler`` emulates the server-side function."""

    def __init__(
        self,
        tables: Optional[dict[str, list[dict[str, Any]]]] = None,
        rpc_handler: Optional[Callable[[str, Mapping[str, Any]], list[dict[str, Any]]]] = None,
    ) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            name: [dict(r) for r in rows] for name, rows in (tables or {}).items()
        }
        self.rpc_handler = rpc_handler
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Optional[Exception] = None

    def _enter(self, op: str, target: str) -> None:
        self.calls.append((op, target))
        if self.fail_with is not None:
            raise self.fail_with

    def _rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    async def select_eq(self, table: str, column: str, value: Any, limit: Optional[int] = None):
        self._enter("select_eq", table)
        rows = [dict(r) for r in self._rows(table) if r.get(column) == value]
        return rows[:limit] if limit is not None else rows

    async def select_one(self, table: str, column: str, value: Any):
        self._enter("select_one", table)
        for r in self._rows(table):
            if r.get(column) == value:
                return dict(r)
        return None

    async def select_all(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Sequence[tuple[str, bool]] = (),
    ):
        self._enter("select_all", table)
        rows = [
            dict(r)
            for r in self._rows(table)
            if all(r.get(k) == v for k, v in (filters or {}).items())
        ]
        for column, descending in reversed(list(order_by)):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=descending)
            rows = present + missing
        return rows

    async def upsert(
        self,
        table: str,
        record: Mapping[str, Any],
        on_conflict: Sequence[str],
        preserve: Sequence[str] = (),
    ):
        self._enter("upsert", table)
        rows = self._rows(table)
        for row in rows:
            if all(row.get(c) == record.get(c) for c in on_conflict):
                for key, value in record.items():
                    if key in on_conflict or key == "id":
                        continue
                    if key in preserve and row.get(key) is not None:
                        continue
                    row[key] = value
                return dict(row)
        new = dict(record)
        new.setdefault("id", str(uuid.uuid4()))
        rows.append(new)
        return dict(new)

    async def rpc(self, name: str, params: Mapping[str, Any]):
        self._enter("rpc", name)
        if self.rpc_handler is None:
            raise CapabilityUnavailable(f"function {name} does not exist")
        return self.rpc_handler(name, params)


class TickingClock:
    """Each call returns a strictly later instant."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def admin_store(store: FakeStore) -> FakeStore:
    """Admin client sharing the public store's data, as with one hosted database."""
    admin = FakeStore()
    admin.tables = store.tables
    return admin
