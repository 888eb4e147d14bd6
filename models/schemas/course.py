from marshmallow import Schema, fields, validate, validates

from models.course import LEVEL_VALUES
from models.schemas.common import validate_money
from models.schemas.course_content import CourseContentOutSchema
from models.schemas.course_session import CourseSessionOutSchema, CourseSummarySchema  # noqa: F401


class CourseCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=5, max=255))
    description = fields.String(allow_none=True, validate=validate.Length(max=2000))
    level = fields.String(required=True, validate=validate.OneOf(LEVEL_VALUES))
    price = fields.Decimal(required=True)
    duration = fields.String(allow_none=True, validate=validate.Length(max=50))
    thumbnail_url = fields.Url(allow_none=True)

    @validates("price")
    def _validate_price(self, value, **kwargs):
        validate_money(value)


class CourseUpdateSchema(Schema):
    # All optional, but validate if present
    title = fields.String(validate=validate.Length(min=5, max=255))
    description = fields.String(allow_none=True, validate=validate.Length(max=2000))
    level = fields.String(validate=validate.OneOf(LEVEL_VALUES))
    price = fields.Decimal()
    duration = fields.String(allow_none=True, validate=validate.Length(max=50))
    thumbnail_url = fields.Url(allow_none=True)

    @validates("price")
    def _validate_price(self, value, **kwargs):
        validate_money(value)


class CourseOutSchema(Schema):
    id = fields.Integer()
    title = fields.String()
    slug = fields.String()
    description = fields.String(allow_none=True)
    level = fields.String()
    price = fields.Decimal(places=2, as_string=True)
    duration = fields.String(allow_none=True)
    thumbnail_url = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class CourseDetailSchema(CourseOutSchema):
    sessions = fields.List(fields.Nested(CourseSessionOutSchema))
    contents = fields.List(fields.Nested(CourseContentOutSchema))
