"""
Review service — deduplicated, paginated reviews for a brewery.

Reviews are read newest-first and deduplicated before pagination, so
``total`` is the number of distinct reviews the UI can page through.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Mapping

from brewery_directory.schemas.review import Review, ReviewPage, ReviewSummary
from brewery_directory.services.directory import run_read
from brewery_directory.services.review_dedup import dedupe_reviews
from brewery_directory.services.store import DirectoryStore

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50


def _to_review(row: Mapping[str, Any]) -> Review:
    data = {k: v for k, v in row.items() if k in Review.model_fields}
    if data.get("id") is not None:
        data["id"] = str(data["id"])
    data["brewery_id"] = str(data["brewery_id"])
    return Review.model_validate(data)


class ReviewService:
    """Read-only access to stored reviews."""

    def __init__(self, store: DirectoryStore, *, table: str = "reviews") -> None:
        self._store = store
        self._table = table

    async def _unique_reviews(self, brewery_id: str) -> list[Mapping[str, Any]]:
        rows = await self._store.select_all(
            self._table,
            filters={"brewery_id": brewery_id},
            order_by=[("review_timestamp", True)],
        )
        unique = dedupe_reviews(rows)
        if len(unique) < len(rows):
            logger.debug(
                "Dropped %d duplicate reviews for brewery %s", len(rows) - len(unique), brewery_id
            )
        return unique

    async def get_reviews(self, brewery_id: str, limit: int = 10, offset: int = 0) -> ReviewPage:
        """Return one page of deduplicated reviews; an empty page on read failure."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)

        result = await run_read(
            f"fetching reviews for brewery {brewery_id!r}",
            lambda: self._unique_reviews(brewery_id),
        )
        unique = result.unwrap_or([])
        page = unique[offset : offset + limit]
        return ReviewPage(
            reviews=[_to_review(r) for r in page],
            total=len(unique),
            limit=limit,
            offset=offset,
            has_more=offset + len(page) < len(unique),
        )

    async def summarize_reviews(self, brewery_id: str) -> ReviewSummary:
        """Count, average rating and per-source counts over deduplicated reviews."""
        result = await run_read(
            f"summarising reviews for brewery {brewery_id!r}",
            lambda: self._unique_reviews(brewery_id),
        )
        unique = result.unwrap_or([])
        ratings = [r["rating"] for r in unique if r.get("rating") is not None]
        average = round(sum(ratings) / len(ratings), 2) if ratings else None
        by_source = Counter(r.get("source") or "unknown" for r in unique)
        return ReviewSummary(
            brewery_id=brewery_id,
            count=len(unique),
            average_rating=average,
            by_source=dict(by_source),
        )
