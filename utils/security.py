"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access token creation/verification via PyJWT
- opaque identifiers for token ids and refresh token values
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError

from utils.clock import utcnow
from utils.errors import Unauthorized

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHash):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def generate_token_value() -> str:
    """Opaque random value handed out as a refresh token."""
    return str(uuid.uuid4())


def create_access_token(
    subject: str,
    email: str,
    *,
    secret: str,
    algorithm: str = "HS256",
    expires_in: timedelta,
    issuer: str = "starter-api",
    now: datetime | None = None,
) -> str:
    """Sign a short-lived access token for `subject`."""
    now = now or utcnow()
    exp = now + expires_in
    payload = {
        "iss": issuer,
        "sub": str(subject),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "type": "access",
        "jti": generate_jti(),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(
    token: str,
    *,
    secret: str,
    algorithm: str = "HS256",
    issuer: str | None = "starter-api",
    expected_type: str = "access",
) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises Unauthorized on a bad signature,
    an expired token, a foreign issuer or a token of the wrong type.
    Pass issuer=None to skip the issuer check.
    """
    options = {"require": ["exp", "iss"]} if issuer else {"require": ["exp"]}
    try:
        decoded = jwt.decode(token, secret, algorithms=[algorithm], issuer=issuer, options=options)
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired", reason="expired")
    except jwt.InvalidTokenError as exc:
        raise Unauthorized("Invalid token", reason=str(exc))

    if decoded.get("type") != expected_type:
        raise Unauthorized("Invalid token", reason="wrong token type")
    return decoded
