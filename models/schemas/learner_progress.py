from marshmallow import Schema, fields, validate

from models.schemas.common import FlexibleDateTime
from models.schemas.course_content import CourseContentOutSchema
from models.schemas.user import UserSummarySchema


class LearnerProgressCreateSchema(Schema):
    # Defaults to the caller when omitted
    user_id = fields.Integer(strict=True, validate=validate.Range(min=1))
    content_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    completed = fields.Boolean(load_default=False)


class LearnerProgressUpdateSchema(Schema):
    completed = fields.Boolean(required=True)


class LearnerProgressOutSchema(Schema):
    id = fields.Integer()
    user_id = fields.Integer()
    content_id = fields.Integer()
    completed = fields.Boolean()
    completed_at = FlexibleDateTime(allow_none=True)
    user = fields.Nested(UserSummarySchema)
    content = fields.Nested(CourseContentOutSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
