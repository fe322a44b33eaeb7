from marshmallow import Schema, fields, pre_load

from models.schemas.common import normalize_email
from models.schemas.user import UserOutSchema


class LoginSchema(Schema):
    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = normalize_email(data["email"])
        return data


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(required=True, data_key="refreshToken")


class AuthResultSchema(Schema):
    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")
    user = fields.Nested(UserOutSchema)
