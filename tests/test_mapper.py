import pytest
from pydantic import ValidationError

from brewery_directory.schemas.attraction import Attraction
from brewery_directory.services.mapper import ATTRACTIONS, BREWERIES, to_application_shape, to_storage_shape
from tests.conftest import attraction_row, brewery_row


def test_null_collections_become_empty():
    attraction = to_application_shape(attraction_row())
    assert attraction.google_types == []
    assert attraction.amenities == []
    assert attraction.photos == []
    assert attraction.hours == {}


def test_absent_collections_become_empty():
    row = attraction_row()
    for key in ("google_types", "amenities", "photos", "hours"):
        del row[key]
    attraction = to_application_shape(row)
    assert attraction.photos == [] and attraction.hours == {}


def test_populated_collections_pass_through():
    row = attraction_row(
        photos=["a.jpg", "b.jpg"],
        hours={"Monday": "12-10 PM", "Tuesday": None},
        amenities=["patio", "patio", "food"],
    )
    attraction = to_application_shape(row)
    assert attraction.photos == ["a.jpg", "b.jpg"]
    assert attraction.hours == {"Monday": "12-10 PM", "Tuesday": None}
    assert attraction.amenities == ["patio", "food"]


def test_json_text_collections_are_parsed():
    row = attraction_row(google_types='["museum", "point_of_interest"]', hours='{"Sunday": "10-5"}')
    attraction = to_application_shape(row)
    assert attraction.google_types == ["museum", "point_of_interest"]
    assert attraction.hours == {"Sunday": "10-5"}


def test_garbage_collection_text_becomes_empty():
    attraction = to_application_shape(attraction_row(photos="not json"))
    assert attraction.photos == []


def test_missing_optional_fields_do_not_raise():
    row = {"name": "Patterson Park", "slug": "patterson-park", "type": "park", "city": "Baltimore"}
    attraction = to_application_shape(row)
    assert attraction.latitude is None and attraction.longitude is None
    assert attraction.id is None


def test_application_shape_serialises_camel_case():
    payload = to_application_shape(attraction_row(rating_count=10)).model_dump(by_alias=True)
    assert payload["placeId"].startswith("place-")
    assert payload["ratingCount"] == 10
    assert "rating_count" not in payload


def test_storage_shape_keeps_empty_collections():
    record = to_storage_shape(to_application_shape(attraction_row()))
    assert record["photos"] == []
    assert record["hours"] == {}
    assert record["amenities"] == []


def test_storage_round_trip_preserves_fields():
    row = attraction_row(photos=["x.jpg"], hours={"Friday": "4-11 PM"}, price_level=2)
    record = to_storage_shape(to_application_shape(row))
    for key, value in row.items():
        if value is not None:
            assert record[key] == value, key


def test_partial_coordinates_rejected():
    with pytest.raises(ValidationError):
        Attraction(name="X", slug="x", type="park", city="Baltimore", latitude=39.0)


def test_slug_must_be_url_safe():
    with pytest.raises(ValidationError):
        Attraction(name="X", slug="has space", type="park", city="Baltimore")


def test_map_rows_skips_invalid_rows_and_honours_limit():
    rows = [
        attraction_row(name="One"),
        attraction_row(name="Broken", slug="o'donnell square"),
        attraction_row(name="Two"),
        attraction_row(name="Three"),
    ]
    assert [a.name for a in ATTRACTIONS.map_rows(rows, limit=2)] == ["One", "Two"]
    assert [a.name for a in ATTRACTIONS.map_rows(rows)] == ["One", "Two", "Three"]


def test_brewery_rows_parse_json_text_and_default_flags():
    row = brewery_row(type='["Brewpub", "Taproom"]', hours='{"Friday": "3-11 PM"}', featured=None)
    brewery = BREWERIES.to_application_shape(row)
    assert brewery.type == ["Brewpub", "Taproom"]
    assert brewery.hours == {"Friday": "3-11 PM"}
    assert brewery.featured is False
    assert brewery.model_dump(by_alias=True)["dogFriendly"] is False
