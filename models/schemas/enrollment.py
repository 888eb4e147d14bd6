from marshmallow import Schema, fields, validate

from models.enrollment import ENROLLMENT_STATUS_VALUES
from models.schemas.course_session import CourseSessionDetailSchema
from models.schemas.user import UserSummarySchema


class EnrollmentCreateSchema(Schema):
    session_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))


class EnrollmentUpdateSchema(Schema):
    status = fields.String(required=True, validate=validate.OneOf(ENROLLMENT_STATUS_VALUES))


class EnrollmentOutSchema(Schema):
    id = fields.Integer()
    user_id = fields.Integer()
    session_id = fields.Integer()
    status = fields.String()
    user = fields.Nested(UserSummarySchema)
    session = fields.Nested(CourseSessionDetailSchema, exclude=("enrollment_count",))
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
