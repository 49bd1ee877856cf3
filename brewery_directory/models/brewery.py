"""Brewery and beer ORM models."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Double, ForeignKey, Integer, String, Text, func

from brewery_directory.config import get_settings
from brewery_directory.database import Base
from brewery_directory.models.attraction import _new_id

_settings = get_settings()


class Brewery(Base):
    """
    A brewery listing. ``type`` holds a JSON list of labels (older rows may
    hold a bare string); ``slug`` is the public lookup key.
    """

    __tablename__ = _settings.breweries_table

    id = Column(Text, primary_key=True, default=_new_id)
    place_id = Column(Text, nullable=True, index=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    type = Column(JSON, nullable=True)

    # Location
    street = Column(Text, nullable=True)
    city = Column(Text, nullable=False, index=True)
    state = Column(Text, nullable=False, server_default="MD")
    zip = Column(Text, nullable=True)
    county = Column(Text, nullable=True, index=True)
    latitude = Column(Double, nullable=True)
    longitude = Column(Double, nullable=True)

    # Contact
    phone = Column(Text, nullable=True)
    website = Column(Text, nullable=True)
    social_media = Column(JSON, nullable=False, default=dict)

    hours = Column(JSON, nullable=False, default=dict)

    # Features
    amenities = Column(JSON, nullable=False, default=list)
    allows_visitors = Column(Boolean, nullable=False, default=False)
    offers_tours = Column(Boolean, nullable=False, default=False)
    beer_to_go = Column(Boolean, nullable=False, default=False)
    has_merch = Column(Boolean, nullable=False, default=False)
    memberships = Column(JSON, nullable=False, default=list)
    food = Column(Text, nullable=True)
    other_drinks = Column(Text, nullable=True)
    parking = Column(Text, nullable=True)
    dog_friendly = Column(Boolean, nullable=False, default=False)
    outdoor_seating = Column(Boolean, nullable=False, default=False)
    logo = Column(Text, nullable=True)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    special_events = Column(JSON, nullable=False, default=list)
    awards = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)

    opened_date = Column(Text, nullable=True)

    # Review summary
    google_rating = Column(Double, nullable=True)
    google_rating_count = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Beer(Base):
    __tablename__ = _settings.beers_table

    id = Column(String(36), primary_key=True, default=_new_id)
    brewery_id = Column(
        Text,
        ForeignKey(f"{_settings.breweries_table}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(Text, nullable=False)
    style = Column(Text, nullable=True)
    abv = Column(Text, nullable=True)
    availability = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
