"""
Record mapper — storage-shaped rows ⇄ application-shaped models.

Storage rows are flat dicts keyed by column name with nullable collections.
The application shape always carries collections (never None). Mapping a
storage None to an empty collection is a one-way normalisation.

``RecordMapper.map_rows`` converts a result set row by row: a row that fails
validation is logged and skipped so one bad record never empties a listing.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Generic, Iterable, Mapping, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from brewery_directory.schemas.attraction import Attraction
from brewery_directory.schemas.brewery import Brewery

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse_json_field(val: Any, empty: Any) -> Any:
    """Server-side functions may hand JSON columns back as text."""
    if val is None:
        return empty
    if isinstance(val, str):
        try:
            val = json.loads(val)
        except ValueError:
            logger.warning("Unparseable JSON collection in storage row: %r", val[:80])
            return empty
    if not isinstance(val, type(empty)):
        return empty
    return val


class RecordMapper(Generic[M]):
    """Field-driven conversion between storage rows and one pydantic model."""

    def __init__(
        self,
        model: type[M],
        scalar_fields: tuple[str, ...],
        list_fields: tuple[str, ...] = (),
        dict_fields: tuple[str, ...] = (),
    ) -> None:
        self.model = model
        self.scalar_fields = scalar_fields
        self.list_fields = list_fields
        self.dict_fields = dict_fields

    def to_application_shape(self, record: Mapping[str, Any], **extra: Any) -> M:
        """Convert a storage row; unknown keys are ignored. Raises ValidationError."""
        data: dict[str, Any] = {
            f: record.get(f) for f in self.scalar_fields if record.get(f) is not None
        }
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        for field in self.list_fields:
            data[field] = list(_parse_json_field(record.get(field), []))
        for field in self.dict_fields:
            data[field] = dict(_parse_json_field(record.get(field), {}))
        data.update(extra)
        return self.model.model_validate(data)

    def to_storage_shape(self, item: M) -> dict[str, Any]:
        """Convert a model into a storage row; empty collections are kept."""
        record: dict[str, Any] = {f: getattr(item, f) for f in self.scalar_fields}
        for field in self.list_fields:
            record[field] = list(getattr(item, field) or [])
        for field in self.dict_fields:
            record[field] = dict(getattr(item, field) or {})
        return record

    def try_map(self, record: Mapping[str, Any], **extra: Any) -> Optional[M]:
        """Like ``to_application_shape`` but logs and returns None on invalid rows."""
        try:
            return self.to_application_shape(record, **extra)
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid %s row id=%r slug=%r: %s",
                self.model.__name__, record.get("id"), record.get("slug"), exc,
            )
            return None

    def map_rows(self, rows: Iterable[Mapping[str, Any]], limit: Optional[int] = None) -> list[M]:
        """Map rows in order, skipping invalid ones, until ``limit`` valid items."""
        items: list[M] = []
        for row in rows:
            if limit is not None and len(items) >= limit:
                break
            item = self.try_map(row)
            if item is not None:
                items.append(item)
        return items


ATTRACTIONS: RecordMapper[Attraction] = RecordMapper(
    Attraction,
    scalar_fields=(
        "id", "place_id", "name", "slug", "type",
        "street", "city", "state", "zip", "county", "latitude", "longitude",
        "description", "phone", "website",
        "rating", "rating_count", "price_level",
        "last_updated", "created_at", "updated_at",
    ),
    list_fields=("google_types", "amenities", "photos"),
    dict_fields=("hours",),
)

# ``type`` stays scalar: storage holds either a JSON list or a bare string,
# and the model normalises both.
BREWERIES: RecordMapper[Brewery] = RecordMapper(
    Brewery,
    scalar_fields=(
        "id", "place_id", "name", "slug", "description", "type",
        "street", "city", "state", "zip", "county", "latitude", "longitude",
        "phone", "website",
        "allows_visitors", "offers_tours", "beer_to_go", "has_merch",
        "food", "other_drinks", "parking", "dog_friendly", "outdoor_seating",
        "logo", "featured", "opened_date", "google_rating", "google_rating_count",
        "created_at", "updated_at",
    ),
    list_fields=("amenities", "memberships", "special_events", "awards", "certifications"),
    dict_fields=("social_media", "hours"),
)


def to_application_shape(record: Mapping[str, Any]) -> Attraction:
    """Convert a storage row into an ``Attraction``; extra keys are ignored."""
    return ATTRACTIONS.to_application_shape(record)


def to_storage_shape(attraction: Attraction) -> dict[str, Any]:
    """Convert an ``Attraction`` into a storage row; empty collections are kept."""
    return ATTRACTIONS.to_storage_shape(attraction)
