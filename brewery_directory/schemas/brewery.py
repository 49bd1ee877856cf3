"""Application-shaped brewery records."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from brewery_directory.schemas.attraction import _SLUG_RE, FacetCount

DEFAULT_BREWERY_TYPE = "Microbrewery"


class Beer(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    style: str = ""
    abv: str = ""
    availability: str = ""

    @field_validator("style", "abv", "availability", mode="before")
    @classmethod
    def _none_is_blank(cls, v: Any) -> Any:
        return "" if v is None else v


class Brewery(BaseModel):
    """
    A brewery as the UI sees it. ``type`` is always a non-empty list; flags
    default to False and collections to empty.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    place_id: Optional[str] = None
    name: str
    slug: str
    description: Optional[str] = None
    type: list[str] = Field(default_factory=lambda: [DEFAULT_BREWERY_TYPE])

    street: Optional[str] = None
    city: str
    state: str = "MD"
    zip: Optional[str] = None
    county: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    phone: Optional[str] = None
    website: Optional[str] = None
    social_media: dict[str, Optional[str]] = Field(default_factory=dict)
    hours: dict[str, Optional[str]] = Field(default_factory=dict)

    amenities: list[str] = Field(default_factory=list)
    allows_visitors: bool = False
    offers_tours: bool = False
    beer_to_go: bool = False
    has_merch: bool = False
    memberships: list[Any] = Field(default_factory=list)
    food: Optional[str] = None
    other_drinks: Optional[str] = None
    parking: Optional[str] = None
    dog_friendly: bool = False
    outdoor_seating: bool = False
    logo: Optional[str] = None
    featured: bool = False
    special_events: list[Any] = Field(default_factory=list)
    awards: list[Any] = Field(default_factory=list)
    certifications: list[Any] = Field(default_factory=list)

    opened_date: Optional[str] = None
    google_rating: Optional[float] = None
    google_rating_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    beers: list[Beer] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _type_as_list(cls, v: Any) -> Any:
        if v is None:
            return [DEFAULT_BREWERY_TYPE]
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except ValueError:
                parsed = v
            v = parsed if isinstance(parsed, list) else [str(parsed)]
        return [t for t in v if t] or [DEFAULT_BREWERY_TYPE]

    @field_validator("slug")
    @classmethod
    def _slug_is_url_safe(cls, v: str) -> str:
        if not _SLUG_RE.match(v):
            raise ValueError(f"slug must be URL-safe: {v!r}")
        return v

    @field_validator("amenities")
    @classmethod
    def _dedupe_amenities(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "Brewery":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must both be set or both be absent")
        return self


class BreweryFacets(BaseModel):
    """City, county, type and amenity indexes over all breweries."""

    cities: list[FacetCount] = Field(default_factory=list)
    counties: list[FacetCount] = Field(default_factory=list)
    types: list[FacetCount] = Field(default_factory=list)
    amenities: list[FacetCount] = Field(default_factory=list)
