import pytest

from brewery_directory.services.geo import (
    haversine_miles,
    km_to_miles,
    meters_to_miles,
)

POINTS = [
    (39.29, -76.61),
    (38.9072, -77.0369),
    (0.0, 0.0),
    (-33.8688, 151.2093),
    (89.9, 179.9),
]


@pytest.mark.parametrize("lat, lon", POINTS)
def test_distance_to_self_is_zero(lat, lon):
    assert haversine_miles(lat, lon, lat, lon) == 0


@pytest.mark.parametrize("p1", POINTS)
@pytest.mark.parametrize("p2", POINTS)
def test_distance_is_symmetric(p1, p2):
    assert haversine_miles(*p1, *p2) == pytest.approx(haversine_miles(*p2, *p1), abs=1e-9)


def test_baltimore_to_washington():
    # Roughly 35 miles between the two downtowns
    d = haversine_miles(39.2904, -76.6122, 38.9072, -77.0369)
    assert 33 < d < 37


def test_one_degree_of_latitude():
    assert haversine_miles(0, 0, 1, 0) == pytest.approx(69.0976, rel=1e-4)


def test_unit_conversions():
    assert km_to_miles(5) == pytest.approx(3.106855)
    assert meters_to_miles(1609.34) == pytest.approx(1.0)
