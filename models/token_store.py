"""
RefreshTokenStore: persistence operations for refresh tokens.

Every write is a single statement followed by a commit, so each operation
is atomic on its own. Revocation uses a conditional UPDATE
(`revoked_at IS NULL`) which makes it idempotent and lets callers learn
whether *they* performed the transition.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import joinedload

from models.refresh_token import RefreshToken
from utils.clock import utcnow
from utils.errors import StorageError
from utils.security import generate_token_value

logger = logging.getLogger(__name__)

TOKEN_CONFLICT = "REFRESH_TOKEN_CONFLICT"


class RefreshTokenStore:
    def __init__(
        self,
        storage,
        value_factory: Callable[[], str] = generate_token_value,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._storage = storage
        self._value_factory = value_factory
        self._clock = clock

    def _session(self):
        return self._storage.get_session()

    def create(self, owner_id: str, expires_at: datetime) -> RefreshToken:
        """Insert a new record with a fresh opaque value."""
        record = RefreshToken(
            token=self._value_factory(),
            user_id=owner_id,
            expires_at=expires_at,
        )
        self._storage.new(record)
        try:
            self._storage.save()
        except IntegrityError as exc:
            detail = str(getattr(exc, "orig", exc))
            # only a duplicate value is worth retrying; e.g. an unknown owner is not
            code = TOKEN_CONFLICT if "unique" in detail.lower() else None
            raise StorageError("Could not store refresh token", code=code, reason=detail) from exc
        except SQLAlchemyError as exc:
            raise StorageError(reason=str(exc)) from exc
        return record

    def find_by_value(self, token: str) -> Optional[RefreshToken]:
        """Exact-match lookup; the owning user is loaded with the record."""
        if not token:
            return None
        try:
            return (
                self._session()
                .query(RefreshToken)
                .options(joinedload(RefreshToken.user))
                .filter(RefreshToken.token == token)
                .populate_existing()
                .first()
            )
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise StorageError(reason=str(exc)) from exc

    def revoke(self, record_id: str) -> bool:
        """
        Set revoked_at if still null. Returns True when this call revoked the
        record, False if it was already revoked or does not exist.
        """
        return self._revoke_where(RefreshToken.id == record_id) > 0

    def revoke_all_for_owner(self, owner_id: str) -> int:
        """Revoke every active record of `owner_id` in one statement."""
        count = self._revoke_where(RefreshToken.user_id == owner_id)
        logger.info("Revoked %d refresh token(s) for user %s", count, owner_id)
        return count

    def _revoke_where(self, criterion) -> int:
        session = self._session()
        try:
            count = (
                session.query(RefreshToken)
                .filter(criterion, RefreshToken.revoked_at.is_(None))
                .update({RefreshToken.revoked_at: self._clock()}, synchronize_session="fetch")
            )
            self._storage.save()
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise StorageError(reason=str(exc)) from exc
        return count
