from pydantic import ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from listing_api.models.property import Property, PropertyType, PropertyStatus
from listing_api.schemas.common import CamelModel


class LocationSchema(CamelModel):
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)

    @field_validator("address", "city", "state", "zip_code", "country", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class PropertyBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price: float = Field(..., gt=0)
    location: LocationSchema
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    area: float = Field(..., gt=0)
    type: PropertyType
    status: PropertyStatus = PropertyStatus.FOR_SALE

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class PropertyCreate(PropertyBase):
    model_config = ConfigDict(extra="forbid")


class PropertyUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[float] = Field(None, gt=0)
    location: Optional[LocationSchema] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    area: Optional[float] = Field(None, gt=0)
    type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class PropertyResponse(PropertyBase):
    id: int
    created_by: int
    created_at: datetime

    @classmethod
    def from_model(cls, prop: Property) -> "PropertyResponse":
        return cls(
            id=prop.id,
            title=prop.title,
            description=prop.description,
            price=prop.price,
            location=LocationSchema(
                address=prop.address,
                city=prop.city,
                state=prop.state,
                zip_code=prop.zip_code,
                country=prop.country,
            ),
            bedrooms=prop.bedrooms,
            bathrooms=prop.bathrooms,
            area=prop.area,
            type=prop.property_type,
            status=prop.status,
            created_by=prop.created_by,
            created_at=prop.created_at,
        )


class PropertyPage(CamelModel):
    properties: List[PropertyResponse]
    has_more: bool


class PropertyFilter(CamelModel):
    """Search filters in the fixed order used to build canonical cache keys."""

    model_config = ConfigDict(extra="forbid")

    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    min_area: Optional[float] = Field(None, ge=0)
    max_area: Optional[float] = Field(None, ge=0)
    type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None

    @field_validator("city", "state", "country", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
