from typing import Optional

from sqlalchemy import func, select
from listing_api.models.user import User
from listing_api.repositories.base import SessionRepository, store_operation


class UserRepository(SessionRepository):
    def get_by_email(self, email: str) -> Optional[User]:
        with store_operation(self.db, "look up user by email"):
            return self.db.execute(
                select(User).where(func.lower(User.email) == func.lower(email))
            ).scalar_one_or_none()

    def add(self, email: str, password_hash: str, name: str) -> User:
        user = User(email=email, password_hash=password_hash, name=name, is_active=True)
        with store_operation(
            self.db, "create user", "A user with this email already exists"
        ):
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        return user
