"""Reviews router — deduplicated, paginated reviews per brewery."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from brewery_directory.dependencies import get_review_service
from brewery_directory.schemas.review import ReviewPage, ReviewSummary
from brewery_directory.services.reviews import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", response_model=ReviewPage)
async def list_reviews(
    brewery_id: Optional[str] = Query(default=None, alias="breweryId"),
    limit: int = Query(default=10, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    reviews: ReviewService = Depends(get_review_service),
) -> ReviewPage:
    """``total`` is the number of reviews after deduplication."""
    if not brewery_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="breweryId is required",
        )
    return await reviews.get_reviews(brewery_id, limit, offset)


@router.get("/{brewery_id}/summary", response_model=ReviewSummary)
async def summary(
    brewery_id: str,
    reviews: ReviewService = Depends(get_review_service),
) -> ReviewSummary:
    return await reviews.summarize_reviews(brewery_id)
