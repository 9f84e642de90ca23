from listing_api.repositories.favorite_repository import FavoriteRepository
from listing_api.repositories.property_repository import PropertyRepository
from listing_api.repositories.recommendation_repository import (
    RecommendationRepository,
)
from listing_api.repositories.user_repository import UserRepository

__all__ = [
    "FavoriteRepository",
    "PropertyRepository",
    "RecommendationRepository",
    "UserRepository",
]
