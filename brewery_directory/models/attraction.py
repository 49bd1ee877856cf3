"""Attraction ORM model — one directory listing near a brewery."""

import uuid

from sqlalchemy import JSON, Column, DateTime, Double, Integer, String, Text, func

from brewery_directory.config import get_settings
from brewery_directory.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Attraction(Base):
    """
    A directory entry synced from an upstream place provider or created directly.
    ``place_id`` is the upsert conflict key; ``slug`` is the public lookup key.
    """

    __tablename__ = get_settings().attractions_table

    id = Column(String(36), primary_key=True, default=_new_id)
    place_id = Column(Text, unique=True, nullable=True, index=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, unique=True, nullable=False, index=True)

    # Categorisation
    type = Column(Text, nullable=False, index=True)  # 'park' | 'museum' | 'restaurant' | ...
    google_types = Column(JSON, nullable=False, default=list)
    amenities = Column(JSON, nullable=False, default=list)

    # Location
    street = Column(Text, nullable=True)
    city = Column(Text, nullable=False, index=True)
    state = Column(Text, nullable=False, server_default="MD")
    zip = Column(Text, nullable=True)
    county = Column(Text, nullable=True, index=True)
    latitude = Column(Double, nullable=True)
    longitude = Column(Double, nullable=True)

    # Details
    description = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    website = Column(Text, nullable=True)

    # Provider data
    rating = Column(Double, nullable=True)
    rating_count = Column(Integer, nullable=True)
    price_level = Column(Integer, nullable=True)  # 0-4
    hours = Column(JSON, nullable=False, default=dict)
    photos = Column(JSON, nullable=False, default=list)

    # Metadata
    last_updated = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
