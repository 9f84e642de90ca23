from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from listing_api import database
from listing_api.cache import CacheClient
from listing_api.cache_keys import CacheKeyBuilder
from listing_api.config import settings
from listing_api.repositories import (
    FavoriteRepository,
    PropertyRepository,
    RecommendationRepository,
    UserRepository,
)
from listing_api.services.auth_service import get_current_user
from listing_api.services.favorite_service import FavoriteService
from listing_api.services.property_service import PropertyService
from listing_api.services.recommendation_service import RecommendationService


def get_db():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_cache(request: Request) -> CacheClient:
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        # App started without its lifespan (e.g. a bare TestClient): run uncached
        cache = CacheClient(None, ttl=settings.CACHE_TTL_SECONDS)
    return cache


def get_key_builder() -> CacheKeyBuilder:
    return CacheKeyBuilder(settings.CACHE_NAMESPACE)


db_dependency = Annotated[Session, Depends(get_db)]
cache_dependency = Annotated[CacheClient, Depends(get_cache)]
keys_dependency = Annotated[CacheKeyBuilder, Depends(get_key_builder)]
CurrentUser = Annotated[dict, Depends(get_current_user)]


def get_user_repository(db: db_dependency) -> UserRepository:
    return UserRepository(db)


def get_property_service(
    db: db_dependency, cache: cache_dependency, keys: keys_dependency
) -> PropertyService:
    return PropertyService(PropertyRepository(db), cache, keys)


def get_favorite_service(
    db: db_dependency, cache: cache_dependency, keys: keys_dependency
) -> FavoriteService:
    return FavoriteService(FavoriteRepository(db), PropertyRepository(db), cache, keys)


def get_recommendation_service(
    db: db_dependency, cache: cache_dependency, keys: keys_dependency
) -> RecommendationService:
    return RecommendationService(
        RecommendationRepository(db),
        UserRepository(db),
        PropertyRepository(db),
        cache,
        keys,
    )


UserRepositoryDependency = Annotated[UserRepository, Depends(get_user_repository)]
PropertyServiceDependency = Annotated[PropertyService, Depends(get_property_service)]
FavoriteServiceDependency = Annotated[FavoriteService, Depends(get_favorite_service)]
RecommendationServiceDependency = Annotated[
    RecommendationService, Depends(get_recommendation_service)
]
