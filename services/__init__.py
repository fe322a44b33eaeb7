"""
Service layer. build_services() wires the collaborators for one storage and
one configuration mapping; it holds no state of its own, so blueprints can
call it per request.
"""
from __future__ import annotations

from dataclasses import dataclass

from models.account_store import AccountStore
from models.token_store import RefreshTokenStore
from services.credentials import CredentialVerifier
from services.sessions import SessionService
from services.tokens import TokenIssuer
from services.users import UsersService


@dataclass(frozen=True)
class Services:
    accounts: AccountStore
    tokens: RefreshTokenStore
    sessions: SessionService
    users: UsersService


def build_services(storage, config) -> Services:
    accounts = AccountStore(storage)
    tokens = RefreshTokenStore(storage)
    sessions = SessionService(
        CredentialVerifier(accounts),
        TokenIssuer.from_config(tokens, config),
        tokens,
    )
    return Services(
        accounts=accounts,
        tokens=tokens,
        sessions=sessions,
        users=UsersService(accounts, sessions=sessions),
    )
