"""
Token issuance: signed access tokens plus stored, opaque refresh tokens.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from models.refresh_token import RefreshToken
from models.token_store import TOKEN_CONFLICT
from utils.clock import utcnow
from utils.durations import DEFAULT_ACCESS_DURATION, DEFAULT_REFRESH_DURATION, parse_duration
from utils.errors import StorageError
from utils.security import create_access_token

logger = logging.getLogger(__name__)

# value collisions are astronomically unlikely; retry a couple of times anyway
REFRESH_CREATE_ATTEMPTS = 3


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenIssuer:
    def __init__(
        self,
        store,
        *,
        secret: str,
        algorithm: str = "HS256",
        access_expires_in: str = "7d",
        refresh_expires_in: str = "30d",
        issuer: str = "starter-api",
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._secret = secret
        self._algorithm = algorithm
        self._access_expires_in = access_expires_in
        self._refresh_expires_in = refresh_expires_in
        self._issuer = issuer
        self._clock = clock

    @classmethod
    def from_config(cls, store, config) -> "TokenIssuer":
        return cls(
            store,
            secret=config["JWT_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            access_expires_in=config.get("JWT_EXPIRATION", "7d"),
            refresh_expires_in=config.get("JWT_REFRESH_EXPIRATION", "30d"),
            issuer=config.get("JWT_ISSUER", "starter-api"),
        )

    def issue_access_token(self, account_id: str, email: str) -> str:
        return create_access_token(
            account_id,
            email,
            secret=self._secret,
            algorithm=self._algorithm,
            expires_in=parse_duration(self._access_expires_in, DEFAULT_ACCESS_DURATION),
            issuer=self._issuer,
            now=self._clock(),
        )

    def issue_refresh_token(self, account_id: str, expires_in: str) -> RefreshToken:
        expires_at = self._clock() + parse_duration(expires_in, DEFAULT_REFRESH_DURATION)
        for attempt in range(1, REFRESH_CREATE_ATTEMPTS + 1):
            try:
                return self._store.create(account_id, expires_at)
            except StorageError as exc:
                if exc.code != TOKEN_CONFLICT or attempt == REFRESH_CREATE_ATTEMPTS:
                    raise
                logger.warning("Refresh token insert conflicted (attempt %d), retrying", attempt)

    def issue_token_pair(self, account_id: str, email: str) -> TokenPair:
        access_token = self.issue_access_token(account_id, email)
        record = self.issue_refresh_token(account_id, self._refresh_expires_in)
        return TokenPair(access_token=access_token, refresh_token=record.token)
