# Import all models so they're registered with Base.metadata
from listing_api.models.user import User
from listing_api.models.property import Property, PropertyStatus, PropertyType
from listing_api.models.favorite import Favorite
from listing_api.models.recommendation import Recommendation

__all__ = [
    "User",
    "Property",
    "PropertyStatus",
    "PropertyType",
    "Favorite",
    "Recommendation",
]
