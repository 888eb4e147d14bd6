import re
from datetime import datetime, timezone
from decimal import Decimal

from marshmallow import ValidationError, fields

# needs a lower, an upper, a digit and one of @$!%*?&
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]")
PASSWORD_MESSAGE = (
    "Password must contain at least one uppercase letter, one lowercase letter, "
    "one number and one special character"
)


def strip_email(v):
    return v.strip() if isinstance(v, str) else v


def validate_password_strength(value: str) -> None:
    if value is None or len(value) < 8:
        raise ValidationError("Password must be at least 8 characters long.")
    if not PASSWORD_RE.match(value):
        raise ValidationError(PASSWORD_MESSAGE)


def validate_money(value: Decimal) -> None:
    if value is None:
        return
    if value < 0:
        raise ValidationError("Must be greater than or equal to 0.")
    if value.as_tuple().exponent < -2:
        raise ValidationError("At most 2 decimal places are allowed.")


def validate_not_blank(value: str) -> None:
    if value is not None and not value.strip():
        raise ValidationError("Must not be blank.")


class FlexibleDateTime(fields.Field):
    """ISO date or datetime in, naive UTC datetime out."""

    default_error_messages = {"invalid": "Not a valid date or datetime."}

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, str) or not value.strip():
            raise self.make_error("invalid")
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise self.make_error("invalid")
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return value.isoformat()
