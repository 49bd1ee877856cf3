import pytest

from brewery_directory.services.breweries import BreweryService
from brewery_directory.services.geo import METERS_PER_MILE, haversine_miles
from tests.conftest import ORIGIN, FakeStore, brewery_row, north_of


def _at(name, miles, **extra):
    lat, lng = north_of(ORIGIN, miles)
    return brewery_row(name=name, latitude=lat, longitude=lng, **extra)


@pytest.fixture
def store():
    return FakeStore({
        "breweries": [
            _at("Union Craft Brewing", 3.0, amenities=["Dog Friendly", "Food Trucks"]),
            _at("Heavy Seas", 12.0, city="Halethorpe", county="Baltimore County",
                type=["Production Brewery", "Taproom"]),
            _at("Brewers Art", 0.5, type="Brewpub", description="Belgian-style ales in Mount Vernon",
                amenities=["Full Kitchen"]),
            _at("Jailbreak Brewing", 20.0, city="Laurel", county="Howard", type=None,
                amenities=["Dog Friendly"]),
        ],
        "beers": [
            {"id": "b1", "brewery_id": "union-craft-brewing", "name": "Duckpin", "style": "Pale Ale",
             "abv": "5.5%", "availability": None},
            {"id": "b2", "brewery_id": "union-craft-brewing", "name": "Old Pro", "style": "Gose",
             "abv": "4.2%", "availability": "Year-round"},
        ],
    })


async def test_lookup_by_slug_attaches_beers(store):
    brewery = await BreweryService(store).get_brewery_by_slug("union-craft-brewing")
    assert brewery.name == "Union Craft Brewing"
    assert [b.name for b in brewery.beers] == ["Duckpin", "Old Pro"]
    assert brewery.beers[0].availability == ""


async def test_lookup_by_id(store):
    brewery = await BreweryService(store).get_brewery_by_id("heavy-seas")
    assert brewery.type == ["Production Brewery", "Taproom"]
    assert brewery.beers == []


async def test_missing_brewery_is_absent(store):
    assert await BreweryService(store).get_brewery_by_slug("nonexistent") is None


async def test_lookup_failure_is_absent(store):
    store.fail_with = ConnectionError("down")
    assert await BreweryService(store).get_brewery_by_id("heavy-seas") is None


async def test_beer_read_failure_keeps_brewery(store):
    class BeerlessStore(FakeStore):
        async def select_eq(self, table, column, value, limit=None):
            raise ConnectionError("beers unavailable")

    flaky = BeerlessStore(store.tables)
    brewery = await BreweryService(flaky).get_brewery_by_slug("union-craft-brewing")
    assert brewery is not None and brewery.beers == []


async def test_storage_nulls_become_defaults(store):
    brewery = await BreweryService(store).get_brewery_by_slug("jailbreak-brewing")
    assert brewery.type == ["Microbrewery"]
    assert brewery.social_media == {} and brewery.hours == {}
    assert brewery.allows_visitors is False and brewery.dog_friendly is False


async def test_bare_string_type_becomes_list(store):
    brewery = await BreweryService(store).get_brewery_by_slug("brewers-art")
    assert brewery.type == ["Brewpub"]


async def test_search_matches_name_description_and_amenities(store):
    service = BreweryService(store)
    assert [b.name for b in await service.search_breweries("heavy")] == ["Heavy Seas"]
    assert [b.name for b in await service.search_breweries("belgian")] == ["Brewers Art"]
    assert [b.name for b in await service.search_breweries("dog friendly")] == [
        "Jailbreak Brewing",
        "Union Craft Brewing",
    ]


async def test_blank_search_lists_everything_up_to_limit(store):
    result = await BreweryService(store).search_breweries("  ", limit=2)
    assert [b.name for b in result] == ["Brewers Art", "Heavy Seas"]


async def test_by_city_is_case_insensitive(store):
    result = await BreweryService(store).get_breweries_by_city("  baltimore ")
    assert [b.name for b in result] == ["Brewers Art", "Union Craft Brewing"]


async def test_by_county_type_and_amenity(store):
    service = BreweryService(store)
    assert [b.name for b in await service.get_breweries_by_county("howard")] == ["Jailbreak Brewing"]
    assert [b.name for b in await service.get_breweries_by_type("taproom")] == ["Heavy Seas"]
    assert [b.name for b in await service.get_breweries_by_type("Microbrewery")] == [
        "Jailbreak Brewing",
        "Union Craft Brewing",
    ]
    assert [b.name for b in await service.get_breweries_by_amenity("full kitchen")] == ["Brewers Art"]


async def test_listing_skips_invalid_rows(store):
    store.tables["breweries"].append(brewery_row(name="Bad Row", slug="bad row", city="Baltimore"))
    result = await BreweryService(store).get_breweries_by_city("Baltimore")
    assert [b.name for b in result] == ["Brewers Art", "Union Craft Brewing"]


async def test_nearby_fallback_uses_miles(store):
    result = await BreweryService(store).get_nearby_breweries(*ORIGIN, radius_miles=10)
    assert [b.name for b in result] == ["Brewers Art", "Union Craft Brewing"]
    assert ("rpc", "get_nearby_breweries") in store.calls


async def test_nearby_server_path(store):
    rows = store.tables["breweries"]

    def handler(name, params):
        assert set(params) == {"lat", "lng", "radius_meters"}
        out = []
        for row in rows:
            meters = haversine_miles(params["lat"], params["lng"], row["latitude"], row["longitude"]) * METERS_PER_MILE
            if meters <= params["radius_meters"]:
                out.append({**row, "distance_meters": meters})
        return sorted(out, key=lambda r: r["distance_meters"])

    store.rpc_handler = handler
    result = await BreweryService(store).get_nearby_breweries(*ORIGIN, radius_miles=15, limit=2)
    assert [b.name for b in result] == ["Brewers Art", "Union Craft Brewing"]
    assert ("select_all", "breweries") not in store.calls


async def test_nearby_failure_is_empty(store):
    store.fail_with = RuntimeError("boom")
    assert await BreweryService(store).get_nearby_breweries(*ORIGIN) == []


async def test_facets(store):
    facets = await BreweryService(store).get_facets()
    assert [(f.value, f.count) for f in facets.cities] == [("Baltimore", 2), ("Halethorpe", 1), ("Laurel", 1)]
    assert ("Howard", 1) in [(f.value, f.count) for f in facets.counties]
    assert [(f.value, f.count) for f in facets.amenities][0] == ("Dog Friendly", 2)
    assert {f.value: f.count for f in facets.types}["Microbrewery"] == 2


async def test_facets_degrade_on_failure(store):
    store.fail_with = ConnectionError()
    facets = await BreweryService(store).get_facets()
    assert facets.cities == [] and facets.amenities == []
