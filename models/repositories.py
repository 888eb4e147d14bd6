"""
Repositories for the authentication core.

The credential service talks to these instead of the session so its
collaborators stay explicit (and swappable in tests).
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from models.user import User
from utils.exceptions import ConflictError


class UserRepository:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def find_by_email(self, email: str) -> Optional[User]:
        session = self.storage.get_session()
        return session.query(User).filter(User.email == email).first()

    def insert(self, user: User) -> User:
        """Insert and commit; the unique email index decides duplicates."""
        self.storage.new(user)
        try:
            self.storage.save()
        except IntegrityError:
            raise ConflictError("User with this email already exists")
        return user

    def update(self, user: User, **fields) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self.storage.new(user)
        self.storage.save()
        return user


class RefreshTokenRepository:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def insert(self, user_id: int, token: str, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(token=token, user_id=user_id, expires_at=expires_at)
        self.storage.new(record)
        self.storage.save()
        return record

    def find_by_token(self, token: str) -> Optional[RefreshToken]:
        session = self.storage.get_session()
        return session.query(RefreshToken).filter(RefreshToken.token == token).first()

    def delete_token(self, user_id: int, token: str) -> int:
        session = self.storage.get_session()
        deleted = (
            session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.token == token)
            .delete(synchronize_session=False)
        )
        self.storage.save()
        return deleted

    def delete_for_user(self, user_id: int) -> int:
        session = self.storage.get_session()
        deleted = (
            session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.storage.save()
        return deleted

    def delete_expired(self, now: datetime, user_id: int | None = None) -> int:
        session = self.storage.get_session()
        query = session.query(RefreshToken).filter(RefreshToken.expires_at < now)
        if user_id is not None:
            query = query.filter(RefreshToken.user_id == user_id)
        deleted = query.delete(synchronize_session=False)
        self.storage.save()
        return deleted

    def count_for_user(self, user_id: int) -> int:
        session = self.storage.get_session()
        return session.query(RefreshToken).filter(RefreshToken.user_id == user_id).count()
