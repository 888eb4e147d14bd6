from marshmallow import Schema, fields, validate

from models.auth_provider import PROVIDER_VALUES
from models.schemas.user import UserSummarySchema


class AuthProviderCreateSchema(Schema):
    user_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    provider = fields.String(required=True, validate=validate.OneOf(PROVIDER_VALUES))
    provider_id = fields.String(required=True, validate=validate.Length(min=1, max=255))


class AuthProviderOutSchema(Schema):
    id = fields.Integer()
    user_id = fields.Integer()
    provider = fields.String()
    provider_id = fields.String()
    user = fields.Nested(UserSummarySchema)
    created_at = fields.DateTime()
