from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask import g, request

from services import get_services
from services.tokens import TokenError
from utils.exceptions import ForbiddenError, UnauthorizedError


@dataclass(frozen=True)
class CurrentUser:
    """Identity carried by the access token; no database round trip."""
    id: int
    email: str
    role: str
    first_name: str
    last_name: str

    @classmethod
    def from_claims(cls, claims: dict) -> "CurrentUser":
        try:
            return cls(
                id=int(claims["sub"]),
                email=claims.get("email", ""),
                role=claims.get("role", ""),
                first_name=claims.get("first_name", ""),
                last_name=claims.get("last_name", ""),
            )
        except (KeyError, TypeError, ValueError):
            raise UnauthorizedError("Invalid token subject")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                raise UnauthorizedError("Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            try:
                claims = get_services().signer.verify_access(token)
            except TokenError as e:
                raise UnauthorizedError(str(e))

            user = CurrentUser.from_claims(claims)
            g.current_user = user
            kwargs["current_user"] = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(required_roles: list[str]):
    """
    Allow access if the caller's role is one of required_roles, else 403.
    """
    req = set(required_roles or [])

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            if kwargs["current_user"].role not in req:
                raise ForbiddenError("Insufficient role")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
