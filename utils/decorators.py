from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from models import storage
from models.account_store import AccountStore
from utils.errors import Forbidden, NotFound, Unauthorized
from utils.security import decode_token


def _bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise Unauthorized("Missing or invalid Authorization header")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("Missing or invalid Authorization header")
    return token


def jwt_required():
    """
    Require a valid access token. Sets g.current_user and g.token_claims.
    When JWT_ENABLED is false every request passes with g.current_user = None.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_app.config.get("JWT_ENABLED", True):
                g.current_user = None
                g.token_claims = {}
                return fn(*args, **kwargs)

            decoded = decode_token(
                _bearer_token(),
                secret=current_app.config["JWT_SECRET"],
                algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
                issuer=current_app.config.get("JWT_ISSUER", "starter-api"),
            )
            try:
                user = AccountStore(storage).find_by_id(decoded.get("sub"))
            except NotFound:
                raise Unauthorized("Could not validate credentials", reason="unknown subject") from None
            if not user.is_active:
                raise Unauthorized("Could not validate credentials", reason="inactive")

            g.current_user = user
            g.token_claims = decoded
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(required_roles: list[str]):
    """
    Allow access if the user has ANY of the required roles, 403 otherwise.
    """
    req = set(required_roles or [])

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            user = getattr(g, "current_user", None)
            if user is None:
                # JWT disabled: nothing to check against
                return fn(*args, **kwargs)
            role = getattr(user.role, "value", user.role)
            if role not in req:
                raise Forbidden("Insufficient role")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
