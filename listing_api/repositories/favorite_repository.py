from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from listing_api.models.favorite import Favorite
from listing_api.repositories.base import SessionRepository, store_operation


class FavoriteRepository(SessionRepository):
    def find(self, user_id: int, property_id: int) -> Optional[Favorite]:
        with store_operation(self.db, "load favorite"):
            result = self.db.execute(
                select(Favorite)
                .where(Favorite.user_id == user_id, Favorite.property_id == property_id)
                .limit(1)
            )
            return result.scalar_one_or_none()

    def add(self, user_id: int, property_id: int) -> Favorite:
        fav = Favorite(user_id=user_id, property_id=property_id)
        with store_operation(self.db, "create favorite"):
            self.db.add(fav)
            self.db.commit()
            self.db.refresh(fav)
        return fav

    def list_for_user(self, user_id: int) -> List[Favorite]:
        with store_operation(self.db, "list favorites"):
            result = self.db.execute(
                select(Favorite)
                .options(selectinload(Favorite.property))
                .where(Favorite.user_id == user_id)
                .order_by(Favorite.id)
            )
            return list(result.scalars().all())

    def delete(self, fav: Favorite) -> None:
        with store_operation(self.db, "delete favorite"):
            self.db.delete(fav)
            self.db.commit()
