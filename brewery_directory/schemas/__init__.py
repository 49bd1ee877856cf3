"""Pydantic schemas package."""

from brewery_directory.schemas.attraction import Attraction, FacetCount, DirectoryFacets
from brewery_directory.schemas.brewery import Beer, Brewery, BreweryFacets
from brewery_directory.schemas.review import Review, ReviewPage, ReviewSummary
from brewery_directory.schemas.article import Article, ArticleIn

__all__ = [
    "Attraction", "FacetCount", "DirectoryFacets",
    "Beer", "Brewery", "BreweryFacets",
    "Review", "ReviewPage", "ReviewSummary",
    "Article", "ArticleIn",
]
