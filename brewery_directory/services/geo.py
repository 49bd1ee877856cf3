"""Great-circle distance helpers."""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_MILES = 3959.0
KM_TO_MILES = 0.621371
METERS_PER_MILE = 1609.34


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Return the Haversine distance in miles between two WGS84 points.

    Out-of-range coordinates are not rejected; validate upstream when strict
    geodesy matters.
    """
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def km_to_miles(km: float) -> float:
    return km * KM_TO_MILES


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE
