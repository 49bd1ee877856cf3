"""Brewery directory core: attraction lookups, proximity search, reviews and news."""

__version__ = "1.0.0"
