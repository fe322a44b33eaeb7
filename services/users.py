"""
User management: registration, paginated listing, lookup, update and soft delete.
"""
from __future__ import annotations

import logging

from sqlalchemy import func, or_

from models.schemas.common import SORT_FIELDS, PaginationQuerySchema
from models.user import User, UserRole
from services.pagination import ListResult
from utils.errors import Conflict
from utils.security import hash_password

logger = logging.getLogger(__name__)

_default_query = PaginationQuerySchema()


def _contains_pattern(term: str) -> str:
    """LIKE pattern matching `term` literally anywhere in the value."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class UsersService:
    def __init__(self, accounts, sessions=None):
        self._accounts = accounts
        # anything with revoke_all_user_tokens(owner_id); used when credentials change
        self._sessions = sessions

    def create(self, data: dict) -> User:
        email = data["email"]
        if self._accounts.email_taken(email):
            raise Conflict("Email already in use")

        user = User(
            email=email,
            password_hash=hash_password(data["password"]),
            first_name=data.get("first_name") or None,
            last_name=data.get("last_name") or None,
            role=data.get("role", UserRole.USER),
            is_active=True,
        )
        self._accounts.add(user)
        logger.info("User created: %s (ID: %s)", user.email, user.id)
        return user

    def find_all(self, params: dict | None = None) -> ListResult:
        params = params if params is not None else _default_query.load({})
        page, limit = params["page"], params["limit"]

        query = self._accounts.query().filter(User.is_active.is_(True))
        search = (params.get("search") or "").strip().lower()
        if search:
            pattern = _contains_pattern(search)
            query = query.filter(
                or_(
                    func.lower(User.first_name).like(pattern, escape="\\"),
                    func.lower(User.last_name).like(pattern, escape="\\"),
                    func.lower(User.email).like(pattern, escape="\\"),
                )
            )

        total = query.count()
        column = getattr(User, SORT_FIELDS[params.get("sort", "createdAt")])
        ordering = column.asc() if params.get("order") == "asc" else column.desc()
        rows = (
            query.order_by(ordering, User.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return ListResult(items=rows, total=total)

    def find_one(self, user_id: str) -> User:
        return self._accounts.find_by_id(user_id)

    def find_by_email(self, email: str) -> User:
        return self._accounts.find_by_email(email)

    def update(self, user_id: str, data: dict) -> User:
        user = self._accounts.find_by_id(user_id)

        email = data.get("email")
        if email and email != user.email and self._accounts.email_taken(email, exclude_id=user.id):
            raise Conflict("Email already in use")

        for attr in ("email", "first_name", "last_name"):
            if attr in data and (attr != "email" or data[attr]):
                setattr(user, attr, data[attr])

        password_changed = bool(data.get("password"))
        if password_changed:
            user.password_hash = hash_password(data["password"])

        self._accounts.save(user)
        if password_changed:
            self._revoke_sessions(user.id)
        logger.info("User updated: %s (ID: %s)", user.email, user.id)
        return user

    def remove(self, user_id: str) -> None:
        user = self._accounts.find_by_id(user_id)
        self._accounts.remove(user)
        self._revoke_sessions(user.id)
        logger.info("User deleted: ID %s", user_id)

    def _revoke_sessions(self, user_id: str) -> None:
        if self._sessions is not None:
            self._sessions.revoke_all_user_tokens(user_id)
