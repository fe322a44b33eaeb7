from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models.user import UserRole
from utils.errors import InvalidCredential
from utils.security import verify_password


@dataclass(frozen=True)
class AccountIdentity:
    """Public view of an account. Never carries the password hash."""
    id: str
    email: str
    role: UserRole
    is_active: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "AccountIdentity":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
            first_name=user.first_name,
            last_name=user.last_name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class CredentialVerifier:
    """Checks an email/password pair against the account store."""

    def __init__(self, accounts):
        self._accounts = accounts

    def verify(self, identifier: str, plaintext_secret: str) -> AccountIdentity:
        # NotFound from the store propagates unchanged
        user = self._accounts.find_by_email(identifier)
        if not verify_password(plaintext_secret or "", user.password_hash):
            raise InvalidCredential()
        return AccountIdentity.from_user(user)
