"""
Session lifecycle: login, refresh-token rotation, logout and mass revocation.

A refresh token is Active until it expires or is revoked; Expired and Revoked
are terminal. Every failure of login/refresh reaches the caller as one
Unauthorized message per flow; the specific reason is only logged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from models.refresh_token import TokenState
from services.credentials import AccountIdentity
from utils.clock import utcnow
from utils.errors import InvalidCredential, NotFound, Unauthorized

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


@dataclass(frozen=True)
class AuthResult:
    access_token: str
    refresh_token: str
    user: AccountIdentity


class SessionService:
    def __init__(self, verifier, issuer, store, clock: Callable[[], datetime] = utcnow):
        self._verifier = verifier
        self._issuer = issuer
        self._store = store
        self._clock = clock

    def login(self, email: str, password: str) -> AuthResult:
        try:
            identity = self._verifier.verify(email, password)
        except (NotFound, InvalidCredential) as exc:
            logger.info("Login rejected for %s: %s", email, exc.kind.value)
            raise Unauthorized(INVALID_CREDENTIALS, reason=exc.kind.value) from None

        if not identity.is_active:
            logger.info("Login rejected for %s: account inactive", email)
            raise Unauthorized(INVALID_CREDENTIALS, reason="inactive")

        pair = self._issuer.issue_token_pair(identity.id, identity.email)
        logger.info("User logged in: %s", identity.email)
        return AuthResult(pair.access_token, pair.refresh_token, identity)

    def refresh(self, presented_token: str) -> AuthResult:
        record = self._store.find_by_value(presented_token)
        if record is None:
            self._reject("not_found")

        state = record.state(self._clock())
        if state is TokenState.REVOKED:
            self._reject("revoked", record.user_id)
        if state is TokenState.EXPIRED:
            self._reject("expired", record.user_id)

        # Rotation: the conditional revoke decides which concurrent redeemer wins.
        if not self._store.revoke(record.id):
            self._reject("revoked", record.user_id)

        owner = record.user
        if owner is None or owner.is_deleted or not owner.is_active:
            self._reject("owner_unavailable", record.user_id)

        # If issuing fails from here the old token stays revoked and the user re-authenticates.
        pair = self._issuer.issue_token_pair(owner.id, owner.email)
        logger.info("Token refreshed for user: %s", owner.email)
        return AuthResult(pair.access_token, pair.refresh_token, AccountIdentity.from_user(owner))

    def logout(self, presented_token: str) -> None:
        record = self._store.find_by_value(presented_token)
        if record is not None and record.revoked_at is None:
            self._store.revoke(record.id)
            logger.info("User logged out: %s", record.user_id)

    def revoke_all_user_tokens(self, owner_id: str) -> None:
        self._store.revoke_all_for_owner(owner_id)

    def _reject(self, reason: str, owner_id: str | None = None):
        logger.warning("Refresh rejected (%s) for user %s", reason, owner_id or "-")
        raise Unauthorized(INVALID_REFRESH_TOKEN, reason=reason)
