import logging
from typing import Any

from pydantic import TypeAdapter

from listing_api.cache import CacheClient
from listing_api.cache_keys import RECOMMENDATIONS, CacheKeyBuilder
from listing_api.exceptions import NotFoundError
from listing_api.models.recommendation import Recommendation
from listing_api.repositories.property_repository import PropertyRepository
from listing_api.repositories.recommendation_repository import RecommendationRepository
from listing_api.repositories.user_repository import UserRepository
from listing_api.schemas.property import PropertyResponse
from listing_api.schemas.recommendation import (
    RecommendationCreate,
    RecommendationResponse,
    RecommendationSender,
)
from listing_api.services.base import CachedResourceService, validate_payload

logger = logging.getLogger(__name__)

_recommendations_adapter = TypeAdapter(list[RecommendationResponse])


def _recommendation_response(rec: Recommendation) -> RecommendationResponse:
    sender = rec.sender
    return RecommendationResponse(
        id=rec.id,
        from_user_id=rec.from_user_id,
        to_user_id=rec.to_user_id,
        property_id=rec.property_id,
        created_at=rec.created_at,
        property=PropertyResponse.from_model(rec.property) if rec.property else None,
        sender=(
            RecommendationSender(id=sender.id, name=sender.name, email=sender.email)
            if sender
            else None
        ),
    )


class RecommendationService(CachedResourceService):
    """Recommendations are read by their recipient, so writes invalidate the recipient's key."""

    def __init__(
        self,
        recommendations: RecommendationRepository,
        users: UserRepository,
        properties: PropertyRepository,
        cache: CacheClient,
        keys: CacheKeyBuilder,
    ):
        super().__init__(cache, keys)
        self.recommendations = recommendations
        self.users = users
        self.properties = properties

    async def recommend_property(self, caller_id: int, data: Any) -> RecommendationResponse:
        payload = validate_payload(RecommendationCreate, data)
        recipient = await self._store(self.users.get_by_email, payload.recipient_email)
        if recipient is None:
            raise NotFoundError("Recipient not found")
        if await self._store(self.properties.get, payload.property_id) is None:
            raise NotFoundError("Property not found")

        rec = await self._store(
            self.recommendations.add, caller_id, recipient.id, payload.property_id
        )
        await self.cache.delete(self.keys.collection(RECOMMENDATIONS, recipient.id))
        logger.info(
            "User %s recommended property %s to user %s",
            caller_id,
            payload.property_id,
            recipient.id,
        )
        return await self._store(_recommendation_response, rec)

    async def get_recommendations(self, caller_id: int) -> list[RecommendationResponse]:
        key = self.keys.collection(RECOMMENDATIONS, caller_id)
        cached = await self._cache_read(key, _recommendations_adapter)
        if cached is not None:
            return cached

        received = await self._store(self.recommendations.list_for_recipient, caller_id)
        result = [_recommendation_response(rec) for rec in received]
        await self._cache_write(key, _recommendations_adapter, result)
        return result
