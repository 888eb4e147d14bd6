from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from models.course_content import CONTENT_TYPE_VALUES


class CourseContentCreateSchema(Schema):
    course_id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    type = fields.String(required=True, validate=validate.OneOf(CONTENT_TYPE_VALUES))
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    content_url = fields.String(allow_none=True)
    order_index = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))


class CourseContentUpdateSchema(Schema):
    type = fields.String(validate=validate.OneOf(CONTENT_TYPE_VALUES))
    title = fields.String(validate=validate.Length(min=1, max=255))
    content_url = fields.String(allow_none=True)
    order_index = fields.Integer(strict=True, validate=validate.Range(min=1))


class ContentOrderSchema(Schema):
    id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    order_index = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))


class ReorderContentSchema(Schema):
    content_orders = fields.List(fields.Nested(ContentOrderSchema), required=True)

    @validates_schema
    def _validate_orders(self, data, **kwargs):
        orders = data.get("content_orders") or []
        ids = [o["id"] for o in orders]
        indexes = [o["order_index"] for o in orders]
        if len(set(ids)) != len(ids):
            raise ValidationError("Duplicate content ids.", "content_orders")
        if len(set(indexes)) != len(indexes):
            raise ValidationError("Duplicate order_index values.", "content_orders")


class CourseContentOutSchema(Schema):
    id = fields.Integer()
    course_id = fields.Integer()
    type = fields.String()
    title = fields.String()
    content_url = fields.String(allow_none=True)
    order_index = fields.Integer()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
