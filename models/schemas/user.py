from marshmallow import Schema, fields, pre_load, validates, ValidationError

from models.schemas.common import normalize_email
from models.user import UserRole


def _check_password(value):
    if value is not None and len(value) < 8:
        raise ValidationError("Password must be at least 8 characters long.")


class UserCreateSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    first_name = fields.String(allow_none=True, data_key="firstName")
    last_name = fields.String(allow_none=True, data_key="lastName")

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = normalize_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        _check_password(value)


class UserUpdateSchema(Schema):
    """Partial update: every field optional."""
    email = fields.Email()
    password = fields.String(load_only=True)
    first_name = fields.String(allow_none=True, data_key="firstName")
    last_name = fields.String(allow_none=True, data_key="lastName")

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = normalize_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        _check_password(value)


class UserOutSchema(Schema):
    """Public projection of a user. Works for User rows and AccountIdentity alike."""
    id = fields.String()
    email = fields.String()
    first_name = fields.String(allow_none=True, data_key="firstName")
    last_name = fields.String(allow_none=True, data_key="lastName")
    role = fields.Enum(UserRole, by_value=True)
    is_active = fields.Boolean(data_key="isActive")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
