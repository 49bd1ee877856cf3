"""
Breweries router — lookup, search, proximity and index endpoints.

Endpoints:
  GET /breweries/search                 — free-text search
  GET /breweries/near                   — breweries within a radius in miles
  GET /breweries/facets                 — city, county, type and amenity indexes
  GET /breweries/city/{city}            — breweries in a city
  GET /breweries/county/{county}        — breweries in a county
  GET /breweries/type/{type}            — breweries of a type
  GET /breweries/amenity/{amenity}      — breweries offering an amenity
  GET /breweries/id/{brewery_id}        — lookup by id
  GET /breweries/{slug}                 — lookup by slug
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from brewery_directory.dependencies import get_brewery_service
from brewery_directory.schemas.brewery import Brewery, BreweryFacets
from brewery_directory.services.breweries import MAX_SEARCH_RESULTS, BreweryService

router = APIRouter(prefix="/breweries", tags=["breweries"])


def _found(brewery: Optional[Brewery]) -> Brewery:
    if brewery is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Brewery not found")
    return brewery


@router.get("/search", response_model=list[Brewery])
async def search(
    q: str = Query(default=""),
    limit: int = Query(default=MAX_SEARCH_RESULTS, ge=1, le=MAX_SEARCH_RESULTS),
    breweries: BreweryService = Depends(get_brewery_service),
) -> list[Brewery]:
    return await breweries.search_breweries(q, limit)


@router.get("/near", response_model=list[Brewery])
async def near(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_miles: float = Query(default=10.0, gt=0, le=250),
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    breweries: BreweryService = Depends(get_brewery_service),
) -> list[Brewery]:
    """Breweries within ``radius_miles`` of (lat, lng), nearest first."""
    return await breweries.get_nearby_breweries(lat, lng, radius_miles, limit)


@router.get("/facets", response_model=BreweryFacets)
async def facets(breweries: BreweryService = Depends(get_brewery_service)) -> BreweryFacets:
    return await breweries.get_facets()


@router.get("/city/{city}", response_model=list[Brewery])
async def by_city(city: str, breweries: BreweryService = Depends(get_brewery_service)) -> list[Brewery]:
    return await breweries.get_breweries_by_city(city)


@router.get("/county/{county}", response_model=list[Brewery])
async def by_county(county: str, breweries: BreweryService = Depends(get_brewery_service)) -> list[Brewery]:
    return await breweries.get_breweries_by_county(county)


@router.get("/type/{brewery_type}", response_model=list[Brewery])
async def by_type(
    brewery_type: str, breweries: BreweryService = Depends(get_brewery_service)
) -> list[Brewery]:
    return await breweries.get_breweries_by_type(brewery_type)


@router.get("/amenity/{amenity}", response_model=list[Brewery])
async def by_amenity(
    amenity: str, breweries: BreweryService = Depends(get_brewery_service)
) -> list[Brewery]:
    return await breweries.get_breweries_by_amenity(amenity)


@router.get("/id/{brewery_id}", response_model=Brewery)
async def by_id(brewery_id: str, breweries: BreweryService = Depends(get_brewery_service)) -> Brewery:
    return _found(await breweries.get_brewery_by_id(brewery_id))


@router.get("/{slug}", response_model=Brewery)
async def by_slug(slug: str, breweries: BreweryService = Depends(get_brewery_service)) -> Brewery:
    return _found(await breweries.get_brewery_by_slug(slug))
