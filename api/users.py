from __future__ import annotations

import uuid

from flask import Blueprint, current_app, request

from api.envelope import no_content, ok, paginated
from models import storage
from models.schemas.common import PaginationQuerySchema
from models.schemas.user import UserCreateSchema, UserOutSchema, UserUpdateSchema
from models.user import UserRole
from services import build_services
from utils.decorators import jwt_required, roles_required
from utils.errors import BadRequest

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)
pagination_query_schema = PaginationQuerySchema()


def _services():
    return build_services(storage, current_app.config)


def _parse_uuid(value: str) -> str:
    try:
        return str(uuid.UUID(value))
    except (ValueError, TypeError):
        raise BadRequest("Validation failed (uuid is expected)") from None


@bp.post("/users")
def create_user():
    """
    Create a new user (registration)
    ---
    tags:
      - Users
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
      201: { description: Created }
      409: { description: Email already in use }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    user = _services().users.create(data)
    return ok(user_out_schema.dump(user), 201)


@bp.get("/users")
@jwt_required()
def list_users():
    """
    List active users (paginated)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10, maximum: 100 }
      - in: query
        name: sort
        type: string
        default: createdAt
        description: "One of createdAt, updatedAt, email, firstName, lastName"
      - { in: query, name: order, type: string, enum: [asc, desc], default: desc }
      - { in: query, name: search, type: string, description: "Matches first name, last name or email" }
    responses:
      200: { description: OK }
      422: { description: Invalid query parameters }
    """
    params = pagination_query_schema.load(request.args.to_dict())
    result = _services().users.find_all(params)
    return paginated(result, params["page"], params["limit"], dump=user_list_out_schema.dump)


@bp.get("/users/<user_id>")
@jwt_required()
def get_user(user_id: str):
    """
    Get a user by id
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, format: uuid, required: true }
    responses:
      200: { description: OK }
      400: { description: Invalid UUID format }
      404: { description: User not found }
    """
    user = _services().users.find_one(_parse_uuid(user_id))
    return ok(user_out_schema.dump(user))


@bp.patch("/users/<user_id>")
@jwt_required()
def update_user(user_id: str):
    """
    Update a user (partial). Changing the password revokes the user's refresh tokens.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: user_id, type: string, format: uuid, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string, minLength: 8 }
            firstName: { type: string }
            lastName: { type: string }
    responses:
      200: { description: Updated }
      400: { description: Invalid UUID format }
      404: { description: User not found }
      409: { description: Email already in use }
    """
    user_id = _parse_uuid(user_id)
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)
    user = _services().users.update(user_id, data)
    return ok(user_out_schema.dump(user))


@bp.delete("/users/<user_id>")
@jwt_required()
def delete_user(user_id: str):
    """
    Delete a user (soft delete; revokes the user's refresh tokens)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, format: uuid, required: true }
    responses:
      204: { description: Deleted }
      400: { description: Invalid UUID format }
      404: { description: User not found }
    """
    _services().users.remove(_parse_uuid(user_id))
    return no_content()


@bp.post("/users/<user_id>/revoke-sessions")
@roles_required([UserRole.ADMIN.value])
def revoke_sessions(user_id: str):
    """
    Admin-only: revoke every refresh token of a user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, format: uuid, required: true }
    responses:
      204: { description: Sessions revoked }
      403: { description: Insufficient role }
      404: { description: User not found }
    """
    services = _services()
    user = services.users.find_one(_parse_uuid(user_id))
    services.sessions.revoke_all_user_tokens(user.id)
    return no_content()
