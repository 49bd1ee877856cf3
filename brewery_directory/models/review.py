"""Review ORM model — third-party reviews attached to a brewery.

Rows are append-only; duplicates from repeated ingestion runs are filtered
at read time.
"""

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Text, func

from brewery_directory.database import Base
from brewery_directory.models.attraction import _new_id


class Review(Base):
    """A single review pulled from Google or Yelp."""

    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=_new_id)
    brewery_id = Column(Text, nullable=False, index=True)
    brewery_name = Column(Text, nullable=True)

    reviewer_name = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)  # 1-5
    review_text = Column(Text, nullable=True)
    review_date = Column(Text, nullable=True)  # relative description, e.g. "2 months ago"
    review_timestamp = Column(BigInteger, nullable=True, index=True)  # unix seconds
    reviewer_url = Column(Text, nullable=True)
    profile_photo_url = Column(Text, nullable=True)
    language = Column(String(10), nullable=True, server_default="en")
    source = Column(String(20), nullable=False, server_default="google")

    fetched_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now())
    created_at = Column(DateTime(timezone=True), nullable=True, server_default=func.now())
