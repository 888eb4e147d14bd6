from marshmallow import Schema, fields, pre_load, validate, validates

from models.schemas.common import strip_email, validate_password_strength
from models.schemas.user import NAME_LENGTH
from utils.security import OTP_MAX, OTP_MIN


class RegisterSchema(Schema):
    first_name = fields.String(required=True, validate=NAME_LENGTH)
    last_name = fields.String(required=True, validate=NAME_LENGTH)
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = strip_email(data["email"])
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        validate_password_strength(value)


class LoginSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = strip_email(data["email"])
        return data


class RefreshSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class LogoutSchema(Schema):
    refresh_token = fields.String(allow_none=True)


class ForgotPasswordSchema(Schema):
    email = fields.Email(required=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = strip_email(data["email"])
        return data


class ResetPasswordSchema(Schema):
    email = fields.Email(required=True)
    otp = fields.Integer(required=True, strict=True, validate=validate.Range(min=OTP_MIN, max=OTP_MAX))
    new_password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = strip_email(data["email"])
        return data

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        validate_password_strength(value)
