from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from supportdesk.core.errors import NotFound
from supportdesk.models.user import User


class IdentityDirectory:
    """Read-only view of the users table."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        return list(self.db.scalars(select(User).order_by(User.id)))

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found", details={"userId": user_id})
        return user
