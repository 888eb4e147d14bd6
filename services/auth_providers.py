from __future__ import annotations

from typing import List

from models.auth_provider import AuthProvider
from models.user import User
from services.base import StorageService
from utils.exceptions import ForbiddenError


class AuthProviderService(StorageService):
    def create(self, data: dict) -> AuthProvider:
        self.get_or_404(User, data["user_id"], "User not found")
        return self.add(
            AuthProvider(**data),
            "This provider account is already linked",
        )

    def for_user(self, user_id: int) -> List[AuthProvider]:
        return (
            self.session.query(AuthProvider)
            .filter(AuthProvider.user_id == user_id)
            .order_by(AuthProvider.id.asc())
            .all()
        )

    def delete(self, provider_id: int, user_id: int, is_admin: bool = False) -> None:
        link = self.get_or_404(AuthProvider, provider_id, "Auth provider not found")
        if link.user_id != user_id and not is_admin:
            raise ForbiddenError("You can only unlink your own providers")
        self.remove(link)
