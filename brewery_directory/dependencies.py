"""Service container built at startup and the FastAPI dependencies that expose it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from brewery_directory.config import Settings
from brewery_directory.database import DirectoryClients
from brewery_directory.services.articles import ArticleService
from brewery_directory.services.breweries import BreweryService
from brewery_directory.services.directory import DirectoryService
from brewery_directory.services.mapper import BREWERIES
from brewery_directory.services.proximity import ProximityResolver
from brewery_directory.services.reviews import ReviewService
from brewery_directory.services.store import DirectoryStore, SqlAlchemyStore


@dataclass
class Services:
    """Everything a request handler needs, wired once per process."""

    directory: DirectoryService
    breweries: BreweryService
    reviews: ReviewService
    articles: ArticleService
    settings: Settings
    clients: Optional[DirectoryClients] = None

    @classmethod
    def from_stores(
        cls,
        settings: Settings,
        store: DirectoryStore,
        admin_store: Optional[DirectoryStore] = None,
        clients: Optional[DirectoryClients] = None,
    ) -> "Services":
        proximity = ProximityResolver(
            store,
            table=settings.attractions_table,
            rpc_name=settings.nearby_rpc_name,
            cache_probe=settings.cache_rpc_probe,
        )
        brewery_proximity = ProximityResolver(
            store,
            table=settings.breweries_table,
            rpc_name=settings.nearby_breweries_rpc_name,
            mapper=BREWERIES,
            type_param=None,
            cache_probe=settings.cache_rpc_probe,
        )
        return cls(
            directory=DirectoryService(
                store, admin_store, proximity=proximity, table=settings.attractions_table
            ),
            breweries=BreweryService(
                store,
                proximity=brewery_proximity,
                table=settings.breweries_table,
                beers_table=settings.beers_table,
            ),
            reviews=ReviewService(store),
            articles=ArticleService(store, admin_store),
            settings=settings,
            clients=clients,
        )

    @classmethod
    def from_clients(cls, settings: Settings, clients: DirectoryClients) -> "Services":
        admin_store = SqlAlchemyStore(clients.admin) if clients.admin is not None else None
        return cls.from_stores(settings, SqlAlchemyStore(clients.public), admin_store, clients)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_directory(request: Request) -> DirectoryService:
    return get_services(request).directory


def get_brewery_service(request: Request) -> BreweryService:
    return get_services(request).breweries


def get_review_service(request: Request) -> ReviewService:
    return get_services(request).reviews


def get_article_service(request: Request) -> ArticleService:
    return get_services(request).articles


async def verify_service_token(
    request: Request,
    x_service_token: Optional[str] = Header(None, alias="X-Service-Token"),
) -> None:
    """Verify that the inter-service token matches the configured secret."""
    expected = get_services(request).settings.service_token
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Write endpoints are disabled: SERVICE_TOKEN is not configured",
        )
    if x_service_token != expected:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid service token",
            headers={"WWW-Authenticate": "Bearer"},
        )
