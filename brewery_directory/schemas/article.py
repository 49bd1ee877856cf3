"""Pydantic schemas for brewery news articles."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ArticleIn(BaseModel):
    """An article produced by the news ingester, before it is stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    url: str
    description: Optional[str] = None
    source: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    relevance_score: float = 0.5


class Article(ArticleIn):
    id: Optional[str] = None
    brewery_id: str
    fetched_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    relevance_score: float = Field(0.5, ge=0.0, le=1.0)
