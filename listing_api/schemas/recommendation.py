from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from listing_api.schemas.common import CamelModel
from listing_api.schemas.property import PropertyResponse


class RecommendationCreate(CamelModel):
    property_id: int = Field(..., gt=0)
    recipient_email: EmailStr


class RecommendationSender(CamelModel):
    id: int
    name: str
    email: str


class RecommendationResponse(CamelModel):
    id: int
    from_user_id: int
    to_user_id: int
    property_id: int
    created_at: Optional[datetime] = None
    property: Optional[PropertyResponse] = None
    sender: Optional[RecommendationSender] = None
