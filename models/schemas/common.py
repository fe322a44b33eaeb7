from marshmallow import Schema, fields, pre_load, validate

MAX_LIMIT = 100
DEFAULT_LIMIT = 10

# API sort key -> model attribute
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "email": "email",
    "firstName": "first_name",
    "lastName": "last_name",
}


def normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


class PaginationQuerySchema(Schema):
    """Query string of list endpoints: ?page=1&limit=10&sort=createdAt&order=desc&search=john"""

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=DEFAULT_LIMIT, validate=validate.Range(min=1, max=MAX_LIMIT))
    sort = fields.String(load_default="createdAt", validate=validate.OneOf(list(SORT_FIELDS)))
    order = fields.String(load_default="desc", validate=validate.OneOf(["asc", "desc"]))
    search = fields.String(load_default=None, allow_none=True)

    @pre_load
    def drop_blank(self, data, **kwargs):
        # "?search=" behaves like no search at all
        return {k: v for k, v in data.items() if not (isinstance(v, str) and not v.strip())}
