from pydantic import Field
from typing import Optional
from datetime import datetime

from listing_api.schemas.common import CamelModel
from listing_api.schemas.property import PropertyResponse


class FavoriteCreate(CamelModel):
    property_id: int = Field(..., gt=0)


class FavoriteResponse(CamelModel):
    id: int
    user_id: int
    property_id: int
    created_at: Optional[datetime] = None
    property: Optional[PropertyResponse] = None
