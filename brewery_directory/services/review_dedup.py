"""Review deduplication by content fingerprint."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

BODY_PREFIX_CHARS = 100

Fingerprint = tuple[Any, int, str, str]


def _normalise(value: Any) -> str:
    return str(value or "").strip().lower()


def _body_prefix(value: Any) -> str:
    # Cut before normalising: leading whitespace counts toward the 100 chars.
    return str(value or "")[:BODY_PREFIX_CHARS].lower().strip()


def review_fingerprint(review: Mapping[str, Any]) -> Fingerprint:
    """(brewery id, timestamp or 0, normalised reviewer, normalised first 100 chars of text)."""
    return (
        review.get("brewery_id"),
        review.get("review_timestamp") or 0,
        _normalise(review.get("reviewer_name")),
        _body_prefix(review.get("review_text")),
    )


def dedupe_reviews(reviews: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """
    Drop every review whose fingerprint was already seen. First seen wins, so
    with newest-first input the newest copy is kept. Reviews with no
    timestamp, reviewer or text all share one fingerprint per brewery.
    """
    seen: set[Fingerprint] = set()
    unique: list[Mapping[str, Any]] = []
    for review in reviews:
        key = review_fingerprint(review)
        if key in seen:
            continue
        seen.add(key)
        unique.append(review)
    return unique
