"""Directory services: mapping, geo search, data access, reviews and news."""
