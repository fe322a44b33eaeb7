"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- POST /auth/logout-all
- GET  /auth/me

Access tokens are HS256 JWTs checked by utils.decorators.jwt_required.
Refresh tokens are opaque values stored in the refresh_tokens table and
rotated on every use (services.sessions).
"""
from __future__ import annotations

from flask import Blueprint, current_app, g, request

from api.envelope import no_content, ok
from models import storage
from models.schemas.auth import AuthResultSchema, LoginSchema, RefreshTokenSchema
from models.schemas.user import UserCreateSchema, UserOutSchema
from services import build_services
from utils.decorators import jwt_required
from utils.errors import Unauthorized

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
auth_result_schema = AuthResultSchema()


def _services():
    return build_services(storage, current_app.config)


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string }
            password: { type: string, minLength: 8 }
            firstName: { type: string }
            lastName: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Email already in use
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    user = _services().users.create(data)
    return ok(user_out_schema.dump(user), 201)


@bp.post("/login")
def login():
    """
    Login: returns an access token, a refresh token and the user
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)
    result = _services().sessions.login(data["email"], data["password"])
    return ok(auth_result_schema.dump(result))


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new token pair (the old one is revoked)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: Tokens refreshed
      401:
        description: Invalid or expired refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_token_schema.load(payload)
    result = _services().sessions.refresh(data["refresh_token"])
    return ok(auth_result_schema.dump(result))


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the given refresh token. Always 204.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      204:
        description: Logged out
      401:
        description: Missing or invalid access token
    """
    payload = request.get_json(silent=True) or {}
    token = payload.get("refreshToken")
    if isinstance(token, str) and token:
        _services().sessions.logout(token)
    return no_content()


@bp.post("/logout-all")
@jwt_required()
def logout_all():
    """
    Revoke every refresh token of the current user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: All sessions revoked
      401:
        description: Unauthorized
    """
    user = g.current_user
    if user is None:
        raise Unauthorized("Authentication is disabled")
    _services().sessions.revoke_all_user_tokens(user.id)
    return no_content()


@bp.get("/me")
@jwt_required()
def me():
    """
    Current user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = g.current_user
    if user is None:
        raise Unauthorized("Authentication is disabled")
    return ok(user_out_schema.dump(user))
