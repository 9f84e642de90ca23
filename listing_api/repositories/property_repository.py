from typing import Any, List, Optional

from sqlalchemy import and_, func, select
from listing_api.models.favorite import Favorite
from listing_api.models.property import Property, PropertyType
from listing_api.models.recommendation import Recommendation
from listing_api.repositories.base import SessionRepository, store_operation
from listing_api.schemas.property import PropertyFilter

DUPLICATE_MESSAGE = "A property with the same address, city, zip code and type already exists"


class PropertyRepository(SessionRepository):
    def add(self, values: dict[str, Any]) -> Property:
        prop = Property(**values)
        with store_operation(self.db, "create property", DUPLICATE_MESSAGE):
            self.db.add(prop)
            self.db.commit()
            self.db.refresh(prop)
        return prop

    def get(self, property_id: int) -> Optional[Property]:
        with store_operation(self.db, "load property"):
            result = self.db.execute(select(Property).where(Property.id == property_id))
            return result.scalar_one_or_none()

    def page(self, offset: int, limit: int) -> List[Property]:
        with store_operation(self.db, "list properties"):
            result = self.db.execute(
                select(Property).order_by(Property.id).offset(offset).limit(limit)
            )
            return list(result.scalars().all())

    def count(self) -> int:
        with store_operation(self.db, "count properties"):
            return self.db.execute(select(func.count(Property.id))).scalar_one()

    def search(self, filters: PropertyFilter) -> List[Property]:
        conditions = []

        # Location filters, case-insensitive exact match. Both sides fold through
        # the database so they agree on non-ASCII text
        if filters.city:
            conditions.append(func.lower(Property.city) == func.lower(filters.city))
        if filters.state:
            conditions.append(func.lower(Property.state) == func.lower(filters.state))
        if filters.country:
            conditions.append(func.lower(Property.country) == func.lower(filters.country))

        # Price filters
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        # Property details
        if filters.bedrooms is not None:
            conditions.append(Property.bedrooms == filters.bedrooms)
        if filters.bathrooms is not None:
            conditions.append(Property.bathrooms == filters.bathrooms)
        if filters.min_area is not None:
            conditions.append(Property.area >= filters.min_area)
        if filters.max_area is not None:
            conditions.append(Property.area <= filters.max_area)
        if filters.type:
            conditions.append(Property.property_type == filters.type)
        if filters.status:
            conditions.append(Property.status == filters.status)

        query = select(Property)
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(Property.id)

        with store_operation(self.db, "search properties"):
            return list(self.db.execute(query).scalars().all())

    def find_duplicate(
        self,
        address: str,
        city: str,
        zip_code: str,
        property_type: PropertyType,
        exclude_id: Optional[int] = None,
    ) -> Optional[Property]:
        query = select(Property).where(
            and_(
                Property.address == address,
                Property.city == city,
                Property.zip_code == zip_code,
                Property.property_type == property_type,
            )
        )
        if exclude_id is not None:
            query = query.where(Property.id != exclude_id)
        with store_operation(self.db, "check for duplicate property"):
            return self.db.execute(query.limit(1)).scalar_one_or_none()

    def update(self, prop: Property, values: dict[str, Any]) -> Property:
        with store_operation(self.db, "update property", DUPLICATE_MESSAGE):
            for key, value in values.items():
                setattr(prop, key, value)
            self.db.commit()
            self.db.refresh(prop)
        return prop

    def delete(self, prop: Property) -> None:
        with store_operation(self.db, "delete property"):
            self.db.delete(prop)
            self.db.commit()

    def referencing_user_ids(self, property_id: int) -> dict[str, set[int]]:
        """Users whose favourites or received recommendations embed this property."""
        with store_operation(self.db, "load property references"):
            favorite_users = set(
                self.db.execute(
                    select(Favorite.user_id).where(Favorite.property_id == property_id)
                ).scalars().all()
            )
            recipients = set(
                self.db.execute(
                    select(Recommendation.to_user_id).where(
                        Recommendation.property_id == property_id
                    )
                ).scalars().all()
            )
        return {"favorites": favorite_users, "recommendations": recipients}
