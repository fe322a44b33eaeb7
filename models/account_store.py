"""
AccountStore: user lookups and writes, blind to soft-deleted accounts.
"""
from __future__ import annotations

from sqlalchemy import func

from models.soft_delete import SoftDeleteFilter
from models.user import User
from utils.errors import NotFound


class AccountStore:
    def __init__(self, storage):
        self._db = SoftDeleteFilter(storage)

    def query(self):
        """Base query over users that are not soft-deleted"""
        return self._db.query(User)

    def find_by_id(self, user_id: str) -> User:
        user = self._db.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def find_by_email(self, email: str) -> User:
        user = self.query().filter(func.lower(User.email) == (email or "").strip().lower()).first()
        if not user:
            raise NotFound("User not found")
        return user

    def email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        # soft-deleted rows still hold their unique email
        query = self._db.wrapped.get_session().query(User).filter(func.lower(User.email) == email.lower())
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def add(self, user: User) -> User:
        self._db.new(user)
        self._db.save()
        return user

    def save(self, user: User) -> User:
        self._db.new(user)
        self._db.save()
        return user

    def remove(self, user: User) -> None:
        self._db.delete(user)
        self._db.save()
