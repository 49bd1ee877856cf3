"""
Attractions router — listing, lookup and proximity endpoints.

Endpoints:
  GET /attractions/near                 — nearest attractions to a point
  GET /attractions/facets               — city, county, type and amenity indexes
  GET /attractions/city/{city}          — attractions in a city
  GET /attractions/type/{type}          — attractions of a type
  GET /attractions/place/{place_id}     — lookup by provider place id
  GET /attractions/{slug}               — lookup by slug
  PUT /attractions                      — upsert (X-Service-Token)

Read endpoints never surface store errors: a failed read is an empty list or 404.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from brewery_directory.dependencies import get_directory, verify_service_token
from brewery_directory.errors import AdminClientUnavailable, WriteError
from brewery_directory.schemas.attraction import Attraction, DirectoryFacets
from brewery_directory.services.directory import DirectoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attractions", tags=["attractions"])


@router.get("/near", response_model=list[Attraction])
async def near(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(default=5.0, gt=0, le=100),
    limit: int = Query(default=10, ge=1, le=100),
    type: Optional[str] = Query(default=None),
    directory: DirectoryService = Depends(get_directory),
) -> list[Attraction]:
    """Attractions within ``radius_km`` of (lat, lng), nearest first."""
    return await directory.get_attractions_near_brewery(lat, lng, radius_km, limit, type)


@router.get("/facets", response_model=DirectoryFacets)
async def facets(directory: DirectoryService = Depends(get_directory)) -> DirectoryFacets:
    return await directory.get_facets()


@router.get("/city/{city}", response_model=list[Attraction])
async def by_city(
    city: str,
    limit: int = Query(default=50, ge=1, le=200),
    directory: DirectoryService = Depends(get_directory),
) -> list[Attraction]:
    return await directory.get_attractions_by_city(city, limit)


@router.get("/type/{attraction_type}", response_model=list[Attraction])
async def by_type(
    attraction_type: str,
    limit: int = Query(default=50, ge=1, le=200),
    directory: DirectoryService = Depends(get_directory),
) -> list[Attraction]:
    return await directory.get_attractions_by_type(attraction_type, limit)


@router.get("/place/{place_id}", response_model=Attraction)
async def by_place_id(
    place_id: str,
    directory: DirectoryService = Depends(get_directory),
) -> Attraction:
    attraction = await directory.get_attraction_by_place_id(place_id)
    if attraction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attraction not found")
    return attraction


@router.get("/{slug}", response_model=Attraction)
async def by_slug(
    slug: str,
    directory: DirectoryService = Depends(get_directory),
) -> Attraction:
    attraction = await directory.get_attraction_by_slug(slug)
    if attraction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attraction not found")
    return attraction


@router.put("", response_model=Attraction)
async def upsert(
    body: Attraction,
    directory: DirectoryService = Depends(get_directory),
    _: None = Depends(verify_service_token),
) -> Attraction:
    """Insert or replace an attraction keyed on its place id."""
    try:
        attraction = await directory.upsert_attraction(body)
    except AdminClientUnavailable as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except WriteError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to upsert attraction",
        ) from exc
    if attraction is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Store returned no row for the upsert",
        )
    return attraction
