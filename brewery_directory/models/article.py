"""News article ORM model — unique per (brewery_id, url)."""

from sqlalchemy import Column, DateTime, Double, String, Text, UniqueConstraint, func

from brewery_directory.database import Base
from brewery_directory.models.attraction import _new_id


class BreweryArticle(Base):
    """An article about a brewery, scored for relevance by the news ingester."""

    __tablename__ = "brewery_articles"
    __table_args__ = (
        UniqueConstraint("brewery_id", "url", name="uq_brewery_article_url"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    brewery_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    url = Column(Text, nullable=False)
    source = Column(Text, nullable=True)
    author = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    fetched_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now())
    relevance_score = Column(Double, nullable=False, default=0.5)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
