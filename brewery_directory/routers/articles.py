"""Articles router — ranked news per brewery, plus the ingester's write endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from brewery_directory.dependencies import get_article_service, verify_service_token
from brewery_directory.errors import AdminClientUnavailable, WriteError
from brewery_directory.schemas.article import Article, ArticleIn
from brewery_directory.services.articles import ArticleService

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("/{brewery_id}", response_model=list[Article])
async def list_articles(
    brewery_id: str,
    limit: int = Query(default=5, ge=1, le=25),
    articles: ArticleService = Depends(get_article_service),
) -> list[Article]:
    return await articles.get_articles(brewery_id, limit)


@router.put("/{brewery_id}", response_model=list[Article])
async def store_articles(
    brewery_id: str,
    body: list[ArticleIn],
    keep: int = Query(default=5, ge=1, le=25),
    articles: ArticleService = Depends(get_article_service),
    _: None = Depends(verify_service_token),
) -> list[Article]:
    """Keep the ``keep`` most relevant of the submitted articles."""
    try:
        return await articles.upsert_articles(brewery_id, body, keep=keep)
    except AdminClientUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except WriteError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to store articles",
        ) from exc
