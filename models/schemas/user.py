from marshmallow import Schema, fields, pre_load, validate, validates

from models.schemas.common import strip_email, validate_not_blank, validate_password_strength
from models.user import ROLE_VALUES

NAME_LENGTH = validate.Length(min=2, max=50)


class UserCreateSchema(Schema):
    """Admin provisioning payload."""
    first_name = fields.String(required=True, validate=NAME_LENGTH)
    last_name = fields.String(required=True, validate=NAME_LENGTH)
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    role = fields.String(validate=validate.OneOf(ROLE_VALUES))
    bio = fields.String(allow_none=True, validate=validate.Length(max=500))
    avatar_url = fields.String(allow_none=True, validate=validate.Length(max=500))
    certifications = fields.String(allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = strip_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        validate_password_strength(value)


class UserUpdateSchema(Schema):
    first_name = fields.String(validate=NAME_LENGTH)
    last_name = fields.String(validate=NAME_LENGTH)
    email = fields.Email()
    password = fields.String(load_only=True)
    role = fields.String(validate=validate.OneOf(ROLE_VALUES))
    bio = fields.String(allow_none=True, validate=validate.Length(max=500))
    avatar_url = fields.String(allow_none=True, validate=validate.Length(max=500))
    certifications = fields.String(allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = strip_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        validate_password_strength(value)

    @validates("first_name")
    def validate_first_name(self, value, **kwargs):
        validate_not_blank(value)


class ProfileUpdateSchema(UserUpdateSchema):
    """Self-service update: same fields minus the role."""

    class Meta:
        exclude = ("role",)


class UserOutSchema(Schema):
    id = fields.Integer()
    first_name = fields.String()
    last_name = fields.String()
    email = fields.String()
    role = fields.String()
    bio = fields.String(allow_none=True)
    avatar_url = fields.String(allow_none=True)
    certifications = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class UserSummarySchema(Schema):
    id = fields.Integer()
    first_name = fields.String()
    last_name = fields.String()
    email = fields.String()
    avatar_url = fields.String(allow_none=True)
