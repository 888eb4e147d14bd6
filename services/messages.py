from __future__ import annotations

from typing import List, Optional

from sqlalchemy import and_, or_

from models.message import Message
from models.user import User
from services.base import StorageService
from utils.exceptions import ForbiddenError, NotFoundError


def _between(user_id: int, other_id: int):
    return or_(
        and_(Message.sender_id == user_id, Message.receiver_id == other_id),
        and_(Message.sender_id == other_id, Message.receiver_id == user_id),
    )


class MessageService(StorageService):
    def send(self, sender_id: int, receiver_id: int, content: str) -> Message:
        if self.storage.get(User, receiver_id) is None:
            raise NotFoundError("Receiver not found")
        return self.add(Message(sender_id=sender_id, receiver_id=receiver_id, content=content))

    def list(self, user_id: int, page: int, limit: int, conversation_with: Optional[int] = None):
        if conversation_with is not None:
            condition = _between(user_id, conversation_with)
        else:
            condition = or_(Message.sender_id == user_id, Message.receiver_id == user_id)
        query = (
            self.session.query(Message)
            .filter(condition)
            .order_by(Message.sent_at.desc(), Message.id.desc())
        )
        return self.paginate(query, page, limit)

    def get(self, message_id: int, user_id: int) -> Message:
        message = self.get_or_404(Message, message_id, "Message not found")
        if user_id not in (message.sender_id, message.receiver_id):
            raise ForbiddenError("Access denied")
        return message

    def mark_read(self, message_id: int, user_id: int) -> Message:
        message = self.get(message_id, user_id)
        if message.receiver_id != user_id:
            raise ForbiddenError("Only receiver can mark message as read")
        message.read = True
        self.commit()
        return message

    def mark_conversation_read(self, user_id: int, other_user_id: int) -> int:
        updated = (
            self.session.query(Message)
            .filter(
                Message.sender_id == other_user_id,
                Message.receiver_id == user_id,
                Message.read.is_(False),
            )
            .update({Message.read: True}, synchronize_session="fetch")
        )
        self.commit()
        return updated

    def unread_count(self, user_id: int) -> int:
        return (
            self.session.query(Message)
            .filter(Message.receiver_id == user_id, Message.read.is_(False))
            .count()
        )

    def conversations(self, user_id: int) -> List[dict]:
        """One entry per correspondent, most recent conversation first."""
        messages = (
            self.session.query(Message)
            .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.sent_at.desc(), Message.id.desc())
            .all()
        )
        by_user = {}
        for message in messages:
            other_id = message.receiver_id if message.sender_id == user_id else message.sender_id
            entry = by_user.get(other_id)
            if entry is None:
                # first hit is the newest message thanks to the ordering
                entry = by_user[other_id] = {
                    "other_user": message.receiver if message.sender_id == user_id else message.sender,
                    "last_message": message,
                    "unread_count": 0,
                    "last_message_time": message.sent_at,
                }
            if message.receiver_id == user_id and not message.read:
                entry["unread_count"] += 1
        return list(by_user.values())
