"""
Credential service:
- register / login issue an access+refresh pair and persist the refresh half
- refresh exchanges a stored refresh token for a new access token (no rotation)
- forgot / reset password via a six digit one-time code
- logout revokes one refresh token or all of them

Collaborators are passed in explicitly so tests can swap any of them.
"""
from __future__ import annotations

import secrets
from typing import Any, Dict, Optional

from argon2 import PasswordHasher

from models.repositories import RefreshTokenRepository, UserRepository
from models.schemas.user import UserOutSchema
from models.user import User, UserRole
from services.email import EmailDispatcher
from services.tokens import TokenError, TokenPair, TokenSigner
from utils.exceptions import BadRequestError, EmailDeliveryError, UnauthorizedError
from utils.logger import get_logger
from utils.security import generate_otp, hash_password, utcnow, verify_password

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH = "Invalid refresh token"
INVALID_RESET_CODE = "Invalid reset code"
RESET_ACK = "If the email exists, a reset code has been sent"

user_out_schema = UserOutSchema()


class AuthService:
    def __init__(self, users: UserRepository, tokens: RefreshTokenRepository,
                 signer: TokenSigner, mailer: EmailDispatcher,
                 hasher: Optional[PasswordHasher] = None):
        self.users = users
        self.tokens = tokens
        self.signer = signer
        self.mailer = mailer
        self.hasher = hasher
        # unknown emails still pay for one Argon2 verify
        self.dummy_hash = hash_password(secrets.token_urlsafe(16), hasher)

    def _issue(self, user: User) -> TokenPair:
        pair = self.signer.issue_pair(user)
        self.tokens.insert(user.id, pair.refresh_token, pair.refresh_expires_at)
        # housekeeping: the caller's own stale tokens go with every new one
        self.tokens.delete_expired(utcnow(), user_id=user.id)
        return pair

    def _auth_response(self, user: User, pair: TokenPair) -> Dict[str, Any]:
        return {
            "user": user_out_schema.dump(user),
            "access_token": pair.access_token,
            "refresh_token": pair.refresh_token,
        }

    def _send(self, to: str, template: str, context: Dict[str, Any]) -> None:
        try:
            self.mailer.send(to, template, context)
        except EmailDeliveryError as exc:
            logger.error("Could not send '%s' email to %s: %s", template, to, exc)

    def register(self, email: str, password: str, first_name: str, last_name: str) -> Dict[str, Any]:
        user = User(
            email=email,
            password_hash=hash_password(password, self.hasher),
            first_name=first_name,
            last_name=last_name,
            role=UserRole.LEARNER.value,
        )
        # the unique index on email rejects concurrent duplicates
        self.users.insert(user)
        pair = self._issue(user)
        self._send(user.email, "welcome", {"first_name": user.first_name})
        logger.info("Registered user %s", user.id)
        return self._auth_response(user, pair)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.users.find_by_email(email)
        password_hash = user.password_hash if user else self.dummy_hash
        if not verify_password(password, password_hash, self.hasher) or user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)
        pair = self._issue(user)
        return self._auth_response(user, pair)

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        try:
            self.signer.verify_refresh(refresh_token)
        except TokenError:
            raise UnauthorizedError(INVALID_REFRESH)

        stored = self.tokens.find_by_token(refresh_token)
        if not stored or stored.expires_at < utcnow():
            raise UnauthorizedError(INVALID_REFRESH)

        owner = stored.user
        if owner is None:
            raise UnauthorizedError(INVALID_REFRESH)
        return {"access_token": self.signer.issue_access(owner)}

    def forgot_password(self, email: str) -> Dict[str, str]:
        user = self.users.find_by_email(email)
        if user:
            otp = generate_otp()
            self.users.update(user, otp=otp)
            self._send(user.email, "password_reset", {"first_name": user.first_name, "otp": otp})
        return {"message": RESET_ACK}

    def reset_password(self, email: str, otp: int, new_password: str) -> Dict[str, str]:
        user = self.users.find_by_email(email)
        if not user or user.otp is None or user.otp != otp:
            raise BadRequestError(INVALID_RESET_CODE)

        self.users.update(user, password_hash=hash_password(new_password, self.hasher), otp=None)
        revoked = self.tokens.delete_for_user(user.id)
        logger.info("Password reset for user %s, %d refresh token(s) revoked", user.id, revoked)
        return {"message": "Password has been reset successfully"}

    def logout(self, user_id: int, refresh_token: Optional[str] = None) -> Dict[str, str]:
        if refresh_token:
            self.tokens.delete_token(user_id, refresh_token)
        else:
            self.tokens.delete_for_user(user_id)
        return {"message": "Logged out successfully"}

    def purge_expired_tokens(self) -> int:
        deleted = self.tokens.delete_expired(utcnow())
        logger.info("Purged %d expired refresh token(s)", deleted)
        return deleted
