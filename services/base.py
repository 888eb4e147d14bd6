"""Shared plumbing for the storage-backed domain services."""
from __future__ import annotations

from typing import Any, List, Tuple

from sqlalchemy.exc import IntegrityError

from models.db_storage import DBStorage
from utils.exceptions import ConflictError, NotFoundError


class StorageService:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    @property
    def session(self):
        return self.storage.get_session()

    def get_or_404(self, cls, obj_id: int, message: str):
        obj = self.storage.get(cls, obj_id)
        if obj is None:
            raise NotFoundError(message)
        return obj

    def commit(self, conflict_message: str | None = None) -> None:
        """Commit; with ``conflict_message`` a unique violation becomes a 409.

        Any other integrity failure propagates to the error boundary.
        """
        try:
            self.storage.save()
        except IntegrityError as exc:
            if conflict_message and _is_unique_violation(exc):
                raise ConflictError(conflict_message)
            raise

    def add(self, obj, conflict_message: str | None = None):
        self.storage.new(obj)
        self.commit(conflict_message)
        return obj

    def remove(self, obj) -> None:
        self.storage.delete(obj)
        self.commit()

    @staticmethod
    def paginate(query, page: int, limit: int) -> Tuple[List[Any], int]:
        total = query.order_by(None).count()
        rows = query.offset((page - 1) * limit).limit(limit).all()
        return rows, total


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(getattr(exc, "orig", exc)).lower()
    return "unique" in message or "duplicate" in message
