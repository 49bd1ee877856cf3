"""Application-shaped attraction records (camelCase on the wire)."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

_SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._~-]*$")


class Attraction(BaseModel):
    """
    One directory listing as the UI sees it.
    Collection fields are never None: absent storage values become empty
    collections. Coordinates are either both set or both absent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    place_id: Optional[str] = None
    name: str
    slug: str
    type: str

    google_types: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)

    street: Optional[str] = None
    city: str
    state: str = "MD"
    zip: Optional[str] = None
    county: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    description: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None

    rating: Optional[float] = None
    rating_count: Optional[int] = None
    price_level: Optional[int] = None
    # day name → hours text; None means closed that day
    hours: dict[str, Optional[str]] = Field(default_factory=dict)
    photos: list[str] = Field(default_factory=list)

    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("slug")
    @classmethod
    def _slug_is_url_safe(cls, v: str) -> str:
        if not _SLUG_RE.match(v):
            raise ValueError(f"slug must be URL-safe: {v!r}")
        return v

    @field_validator("amenities", "google_types")
    @classmethod
    def _dedupe_tags(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))  # deduplicate preserving order

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "Attraction":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must both be set or both be absent")
        return self

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class FacetCount(BaseModel):
    value: str
    count: int


class DirectoryFacets(BaseModel):
    """City, county, type and amenity indexes built concurrently for navigation pages."""

    cities: list[FacetCount] = Field(default_factory=list)
    counties: list[FacetCount] = Field(default_factory=list)
    types: list[FacetCount] = Field(default_factory=list)
    amenities: list[FacetCount] = Field(default_factory=list)
