from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Float,
    DateTime,
    ForeignKey,
    Enum,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from listing_api.database import Base
import enum


class PropertyType(str, enum.Enum):
    APARTMENT = "Apartment"
    HOUSE = "House"
    CONDO = "Condo"
    LAND = "Land"


class PropertyStatus(str, enum.Enum):
    FOR_SALE = "For Sale"
    FOR_RENT = "For Rent"
    SOLD = "Sold"


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)

    # Location
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=False, index=True)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, index=True)

    # Property Details
    property_type = Column(
        Enum(PropertyType, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    status = Column(
        Enum(PropertyStatus, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=PropertyStatus.FOR_SALE,
    )
    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Float, nullable=False, default=0)
    area = Column(Float, nullable=False)

    # Owner
    created_by = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "address",
            "city",
            "zip_code",
            "property_type",
            name="uq_properties_address_city_zip_type",
        ),
    )

    # Relationships
    owner = relationship("User", back_populates="properties")
    favorites = relationship(
        "Favorite", back_populates="property", cascade="all, delete-orphan"
    )
    recommendations = relationship(
        "Recommendation", back_populates="property", cascade="all, delete-orphan"
    )
