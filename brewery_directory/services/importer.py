"""
CSV import of attractions.

Each CSV row is parsed into an ``Attraction`` and written through
``DirectoryService.upsert_attraction``. Headers may be snake_case or
camelCase. Collections may be JSON or delimited text:

    amenities:  '["patio", "dog friendly"]'  or  'patio|dog friendly'
    hours:      '{"Monday": "12-10 PM"}'      or  'Monday: 12-10 PM; Tuesday: Closed'
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd
from pydantic import ValidationError

from brewery_directory.errors import WriteError
from brewery_directory.schemas.attraction import Attraction
from brewery_directory.services.directory import DirectoryService
from brewery_directory.utils.slug import slugify

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_LIST_SPLIT = re.compile(r"[|,]")
_HOURS_SPLIT = re.compile(r"[;|\n]")

LIST_COLUMNS = ("google_types", "amenities", "photos")


@dataclass
class ImportSummary:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.skipped


def _snake(header: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", header.strip()).lower().replace(" ", "_")


def _is_blank(val: object) -> bool:
    if val is None:
        return True
    if isinstance(val, float) and pd.isna(val):
        return True
    return isinstance(val, str) and not val.strip()


def _parse_float(val: object) -> Optional[float]:
    if _is_blank(val):
        return None
    try:
        return float(str(val).replace(",", "").strip())
    except ValueError:
        return None


def _parse_int(val: object) -> Optional[int]:
    number = _parse_float(val)
    return int(number) if number is not None else None


def _parse_text(val: object) -> Optional[str]:
    return None if _is_blank(val) else str(val).strip()


def _parse_list(val: object) -> list[str]:
    """JSON array or '|' / ',' delimited text; photos keep their order."""
    if _is_blank(val):
        return []
    s = str(val).strip()
    if s.startswith("["):
        try:
            parsed = json.loads(s)
            if isinstance(parsed, list):
                return [str(v).strip() for v in parsed if str(v).strip()]
        except ValueError:
            pass
    return [p.strip() for p in _LIST_SPLIT.split(s) if p.strip()]


def _parse_hours(val: object) -> dict[str, Optional[str]]:
    """JSON object or 'Day: hours; Day: Closed'. 'Closed' becomes None."""
    if _is_blank(val):
        return {}
    s = str(val).strip()
    if s.startswith("{"):
        try:
            parsed = json.loads(s)
            if isinstance(parsed, dict):
                return {str(k): (str(v) if v else None) for k, v in parsed.items()}
        except ValueError:
            pass
    hours: dict[str, Optional[str]] = {}
    for chunk in _HOURS_SPLIT.split(s):
        day, sep, text = chunk.partition(":")
        if not sep or not day.strip():
            continue
        text = text.strip()
        hours[day.strip()] = None if not text or text.lower() == "closed" else text
    return hours


def row_to_attraction(row: dict[str, Any]) -> Attraction:
    """
    Build an ``Attraction`` from a CSV row (headers already snake_cased).
    Raises ValueError / ValidationError when the row cannot form a valid entry.
    """
    name = _parse_text(row.get("name"))
    city = _parse_text(row.get("city"))
    if not name or not city:
        raise ValueError("name and city are required")

    data: dict[str, Any] = {
        "place_id": _parse_text(row.get("place_id")),
        "name": name,
        "slug": _parse_text(row.get("slug")) or slugify(name, city),
        "type": _parse_text(row.get("type")) or "attraction",
        "street": _parse_text(row.get("street")),
        "city": city,
        "state": _parse_text(row.get("state")) or "MD",
        "zip": _parse_text(row.get("zip")),
        "county": _parse_text(row.get("county")),
        "latitude": _parse_float(row.get("latitude")),
        "longitude": _parse_float(row.get("longitude")),
        "description": _parse_text(row.get("description")),
        "phone": _parse_text(row.get("phone")),
        "website": _parse_text(row.get("website")),
        "rating": _parse_float(row.get("rating")),
        "rating_count": _parse_int(row.get("rating_count")),
        "price_level": _parse_int(row.get("price_level")),
        "hours": _parse_hours(row.get("hours")),
    }
    for column in LIST_COLUMNS:
        data[column] = _parse_list(row.get(column))
    return Attraction.model_validate(data)


def load_rows(csv_path: str) -> list[dict[str, Any]]:
    """Read the CSV and return rows with snake_case keys, deduplicated on place_id."""
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=True)
    df.columns = [_snake(c) for c in df.columns]
    if "place_id" in df.columns:
        with_id = df[df["place_id"].notna()].drop_duplicates(subset=["place_id"], keep="last")
        df = pd.concat([with_id, df[df["place_id"].isna()]])
    return df.to_dict(orient="records")


async def import_attractions(
    directory: DirectoryService,
    rows: list[dict[str, Any]],
    dry_run: bool = False,
) -> ImportSummary:
    """Upsert every valid row; invalid rows are logged and skipped."""
    summary = ImportSummary()
    for idx, row in enumerate(rows):
        try:
            attraction = row_to_attraction(row)
        except (ValueError, ValidationError) as exc:
            logger.warning("Skipping row %d (%s): %s", idx, row.get("name"), exc)
            summary.skipped += 1
            continue

        if dry_run:
            summary.inserted += 1
            continue

        existing = None
        if attraction.place_id:
            existing = await directory.get_attraction_by_place_id(attraction.place_id)
        else:
            existing = await directory.get_attraction_by_slug(attraction.slug)

        try:
            await directory.upsert_attraction(attraction)
        except WriteError as exc:
            logger.warning("Error on row %d (%s): %s", idx, attraction.name, exc)
            summary.skipped += 1
            continue

        if existing is None:
            summary.inserted += 1
        else:
            summary.updated += 1

        if (idx + 1) % 100 == 0:
            logger.info("Progress: %d / %d", idx + 1, len(rows))

    return summary
