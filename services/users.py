from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher

from models.user import ROLE_VALUES, User
from services.base import StorageService
from utils.security import hash_password

EMAIL_TAKEN = "User with this email already exists"

USER_FIELDS = ("first_name", "last_name", "email", "role", "bio", "avatar_url", "certifications")


class UserService(StorageService):
    def __init__(self, storage, hasher: Optional[PasswordHasher] = None):
        super().__init__(storage)
        self.hasher = hasher

    def create(self, data: dict) -> User:
        user = User(password_hash=hash_password(data["password"], self.hasher))
        user.update(data, USER_FIELDS)
        return self.add(user, EMAIL_TAKEN)

    def list(self, page: int, limit: int, role: Optional[str] = None):
        query = self.session.query(User)
        if role:
            query = query.filter(User.role == role)
        query = query.order_by(User.created_at.desc(), User.id.desc())
        return self.paginate(query, page, limit)

    def get(self, user_id: int) -> User:
        return self.get_or_404(User, user_id, "User not found")

    def update(self, user_id: int, data: dict) -> User:
        user = self.get(user_id)
        user.update(data, USER_FIELDS)
        if data.get("password"):
            user.password_hash = hash_password(data["password"], self.hasher)
        self.commit(EMAIL_TAKEN)
        return user

    def delete(self, user_id: int) -> None:
        self.remove(self.get(user_id))

    def stats(self) -> dict:
        by_role = {
            role: self.session.query(User).filter(User.role == role).count()
            for role in ROLE_VALUES
        }
        return {"total": self.storage.count(User), "by_role": by_role}
