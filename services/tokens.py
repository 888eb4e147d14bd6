"""
Token issuance via PyJWT.

Access and refresh tokens are signed with separate secrets and carry the same
identity claims. Verification checks signature, expiry and token type only.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from models.user import User
from utils.security import generate_jti

ACCESS = "access"
REFRESH = "refresh"


class TokenError(Exception):
    """Raised when a token fails verification."""


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_expires_at: datetime


class TokenSigner:
    def __init__(self, access_secret: str, refresh_secret: str, algorithm: str = "HS256",
                 access_ttl: timedelta = timedelta(minutes=15),
                 refresh_ttl: timedelta = timedelta(days=7),
                 issuer: str = "elearning-api"):
        if not access_secret or not refresh_secret:
            raise ValueError("Access and refresh signing secrets are required")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.issuer = issuer

    @staticmethod
    def claims_for(user: User) -> Dict[str, Any]:
        # PyJWT insists on a string subject
        return {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "first_name": user.first_name,
            "last_name": user.last_name,
        }

    def _encode(self, user: User, token_type: str, secret: str, ttl: timedelta):
        now = datetime.now(timezone.utc)
        expires_at = now + ttl
        payload = self.claims_for(user)
        payload.update({
            "iss": self.issuer,
            "iat": now,
            "exp": expires_at,
            "type": token_type,
            "jti": generate_jti(),
        })
        token = jwt.encode(payload, secret, algorithm=self.algorithm)
        # stored expiry is naive UTC like every other DateTime column
        return token, expires_at.replace(tzinfo=None)

    def issue_access(self, user: User) -> str:
        token, _ = self._encode(user, ACCESS, self.access_secret, self.access_ttl)
        return token

    def issue_refresh(self, user: User):
        return self._encode(user, REFRESH, self.refresh_secret, self.refresh_ttl)

    def issue_pair(self, user: User) -> TokenPair:
        access = self.issue_access(user)
        refresh, refresh_expires_at = self.issue_refresh(user)
        return TokenPair(access, refresh, refresh_expires_at)

    def _decode(self, token: str, secret: str, expected_type: str) -> Dict[str, Any]:
        try:
            decoded = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "sub", "type"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token expired")
        except jwt.InvalidTokenError as exc:
            raise TokenError(f"Invalid token: {exc}")

        if decoded.get("type") != expected_type:
            raise TokenError("Wrong token type")
        return decoded

    def verify_access(self, token: str) -> Dict[str, Any]:
        return self._decode(token, self.access_secret, ACCESS)

    def verify_refresh(self, token: str) -> Dict[str, Any]:
        return self._decode(token, self.refresh_secret, REFRESH)
