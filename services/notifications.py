from __future__ import annotations

from typing import Optional

from models.notification import Notification
from models.user import User
from services.base import StorageService
from utils.exceptions import ForbiddenError, NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)


class NotificationService(StorageService):
    def create(self, data: dict) -> Notification:
        self.get_or_404(User, data["user_id"], "User not found")
        return self.add(Notification(**data))

    def create_for_user(self, user_id: int, title: str, message: str) -> Notification:
        """Side channel used by enrollments and learner progress."""
        notification = self.add(Notification(user_id=user_id, title=title, message=message))
        logger.info("Notification '%s' queued for user %s", title, user_id)
        return notification

    def list_for_user(self, user_id: int, page: int, limit: int, unread_only: Optional[bool] = None):
        query = self.session.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        query = query.order_by(Notification.sent_at.desc(), Notification.id.desc())
        return self.paginate(query, page, limit)

    def unread_count(self, user_id: int) -> int:
        return (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    def get_owned(self, notification_id: int, user_id: int) -> Notification:
        notification = self.get_or_404(Notification, notification_id, "Notification not found")
        if notification.user_id != user_id:
            # other people's notifications are indistinguishable from missing ones
            raise NotFoundError("Notification not found")
        return notification

    def mark_read(self, notification_id: int, user_id: int) -> Notification:
        notification = self.get_owned(notification_id, user_id)
        notification.is_read = True
        self.commit()
        return notification

    def mark_all_read(self, user_id: int) -> int:
        updated = (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session="fetch")
        )
        self.commit()
        return updated

    def delete(self, notification_id: int, user_id: int, is_admin: bool = False) -> None:
        notification = self.get_or_404(Notification, notification_id, "Notification not found")
        if notification.user_id != user_id and not is_admin:
            raise ForbiddenError("You can only delete your own notifications")
        self.remove(notification)
