from typing import List

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from listing_api.models.recommendation import Recommendation
from listing_api.repositories.base import SessionRepository, store_operation


class RecommendationRepository(SessionRepository):
    def add(self, from_user_id: int, to_user_id: int, property_id: int) -> Recommendation:
        recommendation = Recommendation(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            property_id=property_id,
        )
        with store_operation(self.db, "create recommendation"):
            self.db.add(recommendation)
            self.db.commit()
            self.db.refresh(recommendation)
        return recommendation

    def list_for_recipient(self, user_id: int) -> List[Recommendation]:
        with store_operation(self.db, "list recommendations"):
            result = self.db.execute(
                select(Recommendation)
                .options(
                    selectinload(Recommendation.property),
                    selectinload(Recommendation.sender),
                )
                .where(Recommendation.to_user_id == user_id)
                .order_by(Recommendation.id)
            )
            return list(result.scalars().all())
