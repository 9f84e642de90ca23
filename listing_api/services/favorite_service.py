import logging
from typing import Any

from pydantic import TypeAdapter

from listing_api.cache import CacheClient
from listing_api.cache_keys import FAVORITES, CacheKeyBuilder
from listing_api.exceptions import NotFoundError
from listing_api.models.favorite import Favorite
from listing_api.repositories.favorite_repository import FavoriteRepository
from listing_api.repositories.property_repository import PropertyRepository
from listing_api.schemas.favorite import FavoriteCreate, FavoriteResponse
from listing_api.schemas.property import PropertyResponse
from listing_api.services.base import CachedResourceService, parse_id, validate_payload

logger = logging.getLogger(__name__)

_favorites_adapter = TypeAdapter(list[FavoriteResponse])


def _favorite_response(fav: Favorite) -> FavoriteResponse:
    return FavoriteResponse(
        id=fav.id,
        user_id=fav.user_id,
        property_id=fav.property_id,
        created_at=fav.created_at,
        property=PropertyResponse.from_model(fav.property) if fav.property else None,
    )


class FavoriteService(CachedResourceService):
    """Favourites are always scoped to the caller; the caller id is the cache key."""

    def __init__(
        self,
        favorites: FavoriteRepository,
        properties: PropertyRepository,
        cache: CacheClient,
        keys: CacheKeyBuilder,
    ):
        super().__init__(cache, keys)
        self.favorites = favorites
        self.properties = properties

    async def add_favorite(self, caller_id: int, data: Any) -> FavoriteResponse:
        payload = validate_payload(FavoriteCreate, data)
        if await self._store(self.properties.get, payload.property_id) is None:
            raise NotFoundError("Property not found")

        # Idempotent: return existing
        existing = await self._store(self.favorites.find, caller_id, payload.property_id)
        if existing:
            return await self._store(_favorite_response, existing)

        fav = await self._store(self.favorites.add, caller_id, payload.property_id)
        await self.cache.delete(self.keys.collection(FAVORITES, caller_id))
        logger.info("User %s added property %s to favorites", caller_id, payload.property_id)
        # Builds the embedded property, which may lazy load
        return await self._store(_favorite_response, fav)

    async def get_favorites(self, caller_id: int) -> list[FavoriteResponse]:
        key = self.keys.collection(FAVORITES, caller_id)
        cached = await self._cache_read(key, _favorites_adapter)
        if cached is not None:
            return cached

        favorites = await self._store(self.favorites.list_for_user, caller_id)
        result = [_favorite_response(fav) for fav in favorites]
        await self._cache_write(key, _favorites_adapter, result)
        return result

    async def remove_favorite(self, caller_id: int, property_id: Any) -> bool:
        pid = parse_id(property_id, field="propertyId")
        fav = await self._store(self.favorites.find, caller_id, pid)
        if fav is not None:
            await self._store(self.favorites.delete, fav)
        await self.cache.delete(self.keys.collection(FAVORITES, caller_id))
        return fav is not None
