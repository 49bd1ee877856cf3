"""News articles attached to breweries: ranked reads and the ingester's upsert."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from brewery_directory.errors import AdminClientUnavailable, WriteError
from brewery_directory.schemas.article import Article, ArticleIn
from brewery_directory.services.directory import run_read, utcnow
from brewery_directory.services.store import DirectoryStore

logger = logging.getLogger(__name__)

DEFAULT_KEEP = 5

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def clamp_relevance(score: Optional[float]) -> float:
    if score is None:
        return 0.5
    return max(0.0, min(1.0, float(score)))


def _published_key(value: Any) -> datetime:
    if not isinstance(value, datetime):
        return _OLDEST
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_article(row: Mapping[str, Any]) -> Article:
    data = {k: v for k, v in row.items() if k in Article.model_fields and v is not None}
    if "id" in data:
        data["id"] = str(data["id"])
    data["relevance_score"] = clamp_relevance(row.get("relevance_score"))
    return Article.model_validate(data)


class ArticleService:
    """Ranked article reads and the privileged article upsert."""

    def __init__(
        self,
        store: DirectoryStore,
        admin_store: Optional[DirectoryStore] = None,
        *,
        table: str = "brewery_articles",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._admin_store = admin_store
        self._table = table
        self._clock = clock

    async def get_articles(self, brewery_id: str, limit: int = 5) -> list[Article]:
        """Most relevant articles first, newest first among equals."""

        async def fetch() -> list[Article]:
            rows = await self._store.select_all(self._table, filters={"brewery_id": brewery_id})
            rows.sort(key=lambda r: _published_key(r.get("published_at")), reverse=True)
            rows.sort(key=lambda r: clamp_relevance(r.get("relevance_score")), reverse=True)
            return [_to_article(r) for r in rows[: max(0, limit)]]

        return (await run_read(f"fetching articles for brewery {brewery_id!r}", fetch)).unwrap_or([])

    async def upsert_articles(
        self,
        brewery_id: str,
        articles: Sequence[ArticleIn],
        keep: int = DEFAULT_KEEP,
    ) -> list[Article]:
        """
        Store the ``keep`` most relevant articles for a brewery, keyed on
        (brewery_id, url). Lower-scored articles are simply not written.
        """
        if self._admin_store is None:
            raise AdminClientUnavailable("Admin store client not available")

        ranked = sorted(articles, key=lambda a: clamp_relevance(a.relevance_score), reverse=True)
        now = self._clock()
        stored: list[Article] = []
        for article in ranked[: max(0, keep)]:
            record = article.model_dump()
            record.update(
                brewery_id=brewery_id,
                relevance_score=clamp_relevance(article.relevance_score),
                fetched_at=now,
                updated_at=now,
                created_at=now,
            )
            try:
                row = await self._admin_store.upsert(
                    self._table,
                    record,
                    on_conflict=("brewery_id", "url"),
                    preserve=("created_at",),
                )
            except Exception as exc:
                logger.error("Error upserting article %s for %s: %s", article.url, brewery_id, exc)
                raise WriteError(f"Upsert of article {article.url!r} failed: {exc}") from exc
            if row:
                stored.append(_to_article(row))
        logger.info("Stored %d/%d articles for brewery %s", len(stored), len(articles), brewery_id)
        return stored
