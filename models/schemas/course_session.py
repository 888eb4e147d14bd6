from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from models.course_session import SESSION_STATUS_VALUES
from models.schemas.common import FlexibleDateTime
from models.schemas.user import UserSummarySchema


class CourseSummarySchema(Schema):
    id = fields.Integer()
    title = fields.String()
    slug = fields.String()
    thumbnail_url = fields.String(allow_none=True)


class CourseSessionCreateSchema(Schema):
    course_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    trainer_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    start_date = FlexibleDateTime(required=True)
    end_date = FlexibleDateTime(required=True)
    location = fields.String(allow_none=True, validate=validate.Length(max=255))
    status = fields.String(validate=validate.OneOf(SESSION_STATUS_VALUES))


class CourseSessionUpdateSchema(Schema):
    trainer_id = fields.Integer(strict=True, validate=validate.Range(min=1))
    start_date = FlexibleDateTime()
    end_date = FlexibleDateTime()
    location = fields.String(allow_none=True, validate=validate.Length(max=255))
    status = fields.String(validate=validate.OneOf(SESSION_STATUS_VALUES))

    @validates_schema
    def _not_empty(self, data, **kwargs):
        if not data:
            raise ValidationError("At least one field is required.")


class SessionStatusSchema(Schema):
    status = fields.String(required=True, validate=validate.OneOf(SESSION_STATUS_VALUES))


class CourseSessionOutSchema(Schema):
    id = fields.Integer()
    course_id = fields.Integer()
    trainer_id = fields.Integer()
    start_date = FlexibleDateTime()
    end_date = FlexibleDateTime()
    location = fields.String(allow_none=True)
    status = fields.String()
    trainer = fields.Nested(UserSummarySchema)
    enrollment_count = fields.Method("get_enrollment_count")
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

    def get_enrollment_count(self, obj):
        return len(getattr(obj, "enrollments", None) or [])


class CourseSessionDetailSchema(CourseSessionOutSchema):
    course = fields.Nested(CourseSummarySchema)
