"""SQLAlchemy ORM models package."""

from brewery_directory.database import Base
from brewery_directory.models.attraction import Attraction
from brewery_directory.models.brewery import Beer, Brewery
from brewery_directory.models.review import Review
from brewery_directory.models.article import BreweryArticle

__all__ = ["Base", "Attraction", "Beer", "Brewery", "Review", "BreweryArticle"]
