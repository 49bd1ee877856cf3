"""Pydantic schemas for review listings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Review(BaseModel):
    """A review as shown on a brewery page. Only ``brewery_id`` is guaranteed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    brewery_id: str
    reviewer_name: Optional[str] = None
    rating: Optional[int] = None
    review_text: Optional[str] = None
    review_date: Optional[str] = None
    review_timestamp: Optional[int] = None
    reviewer_url: Optional[str] = None
    profile_photo_url: Optional[str] = None
    language: Optional[str] = None
    source: Optional[str] = None


class ReviewPage(BaseModel):
    """One page of deduplicated reviews; ``total`` counts reviews after dedup."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    reviews: list[Review] = Field(default_factory=list)
    total: int = 0
    limit: int
    offset: int
    has_more: bool = False


class ReviewSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    brewery_id: str
    count: int = 0
    average_rating: Optional[float] = None
    by_source: dict[str, int] = Field(default_factory=dict)
