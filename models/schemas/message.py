from marshmallow import Schema, fields, validate

from models.schemas.common import FlexibleDateTime, validate_not_blank


class MessageCreateSchema(Schema):
    receiver_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    content = fields.String(
        required=True,
        validate=[validate.Length(min=1, max=1000), validate_not_blank],
    )


class MessageUserSchema(Schema):
    id = fields.Integer()
    first_name = fields.String()
    last_name = fields.String()
    avatar_url = fields.String(allow_none=True)


class MessageOutSchema(Schema):
    id = fields.Integer()
    sender_id = fields.Integer()
    receiver_id = fields.Integer()
    content = fields.String()
    read = fields.Boolean()
    sent_at = FlexibleDateTime()
    sender = fields.Nested(MessageUserSchema)
    receiver = fields.Nested(MessageUserSchema)


class ConversationOutSchema(Schema):
    other_user = fields.Nested(MessageUserSchema)
    last_message = fields.Nested(MessageOutSchema, only=("id", "sender_id", "receiver_id", "content", "read", "sent_at"))
    unread_count = fields.Integer()
    last_message_time = FlexibleDateTime()
