from marshmallow import Schema, fields, validate

from models.schemas.common import FlexibleDateTime


class NotificationCreateSchema(Schema):
    user_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    message = fields.String(required=True, validate=validate.Length(min=1, max=1000))


class NotificationOutSchema(Schema):
    id = fields.Integer()
    user_id = fields.Integer()
    title = fields.String()
    message = fields.String()
    is_read = fields.Boolean()
    sent_at = FlexibleDateTime()
