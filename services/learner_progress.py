from __future__ import annotations

from typing import Optional

from models.course import Course
from models.course_content import CourseContent
from models.learner_progress import LearnerProgress
from models.user import User, UserRole
from services.base import StorageService
from services.notifications import NotificationService
from utils.exceptions import ForbiddenError, NotFoundError
from utils.security import utcnow

PROGRESS_TAKEN = "Progress already exists for this content"

STAFF_ROLES = (UserRole.ADMIN.value, UserRole.TRAINER.value)


def _percentage(part: int, whole: int) -> int:
    # half-up, so 1 of 8 reads 13
    return (part * 200 + whole) // (2 * whole) if whole else 0


class LearnerProgressService(StorageService):
    def __init__(self, storage, notifications: NotificationService):
        super().__init__(storage)
        self.notifications = notifications

    def _notify_completed(self, progress: LearnerProgress) -> None:
        content = progress.content
        self.notifications.create_for_user(
            progress.user_id,
            "Content Completed",
            f'You have completed "{content.title}" in {content.course.title}',
        )

    def create(self, user_id: int, content_id: int, completed: bool = False) -> LearnerProgress:
        self.get_or_404(CourseContent, content_id, "Course content not found")
        self.get_or_404(User, user_id, "User not found")
        progress = self.add(
            LearnerProgress(
                user_id=user_id,
                content_id=content_id,
                completed=completed,
                completed_at=utcnow() if completed else None,
            ),
            PROGRESS_TAKEN,
        )
        if completed:
            self._notify_completed(progress)
        return progress

    def list(self, page: int, limit: int, user_id: Optional[int] = None,
             content_id: Optional[int] = None, completed: Optional[bool] = None):
        query = self.session.query(LearnerProgress)
        if user_id is not None:
            query = query.filter(LearnerProgress.user_id == user_id)
        if content_id is not None:
            query = query.filter(LearnerProgress.content_id == content_id)
        if completed is not None:
            query = query.filter(LearnerProgress.completed.is_(completed))
        query = query.order_by(LearnerProgress.updated_at.desc(), LearnerProgress.id.desc())
        return self.paginate(query, page, limit)

    def get(self, progress_id: int) -> LearnerProgress:
        return self.get_or_404(LearnerProgress, progress_id, "Learner progress not found")

    def get_visible(self, progress_id: int, user_id: int, role: str) -> LearnerProgress:
        progress = self.get(progress_id)
        if progress.user_id != user_id and role not in STAFF_ROLES:
            raise ForbiddenError("You can only access your own progress")
        return progress

    def check_create_for(self, user_id: int, caller_id: int, role: str) -> None:
        """Learners record progress for themselves only."""
        if user_id != caller_id and role not in STAFF_ROLES:
            raise ForbiddenError("Learners can only record their own progress")

    def update(self, progress_id: int, completed: bool) -> LearnerProgress:
        progress = self.get(progress_id)
        return self._set_completed(progress, completed)

    def _set_completed(self, progress: LearnerProgress, completed: bool) -> LearnerProgress:
        newly_completed = completed and not progress.completed
        if newly_completed:
            progress.completed_at = utcnow()
        elif not completed:
            progress.completed_at = None
        progress.completed = completed
        self.commit()
        if newly_completed:
            self._notify_completed(progress)
        return progress

    def mark_completed(self, user_id: int, content_id: int) -> LearnerProgress:
        existing = (
            self.session.query(LearnerProgress)
            .filter(LearnerProgress.user_id == user_id, LearnerProgress.content_id == content_id)
            .first()
        )
        if existing:
            return self._set_completed(existing, True)
        return self.create(user_id, content_id, completed=True)

    def delete(self, progress_id: int) -> None:
        self.remove(self.get(progress_id))

    def course_progress(self, user_id: int, course_id: int) -> dict:
        if self.storage.get(Course, course_id) is None:
            raise NotFoundError("Course not found")
        contents = (
            self.session.query(CourseContent)
            .filter(CourseContent.course_id == course_id)
            .order_by(CourseContent.order_index.asc())
            .all()
        )
        records = {
            p.content_id: p
            for p in self.session.query(LearnerProgress).filter(
                LearnerProgress.user_id == user_id,
                LearnerProgress.content_id.in_([c.id for c in contents]),
            )
        }
        rows = []
        for content in contents:
            record = records.get(content.id)
            rows.append({
                "id": content.id,
                "title": content.title,
                "type": content.type,
                "order_index": content.order_index,
                "completed": bool(record and record.completed),
                "completed_at": record.completed_at.isoformat() if record and record.completed_at else None,
            })
        completed = sum(1 for row in rows if row["completed"])
        return {
            "course_id": course_id,
            "total_contents": len(rows),
            "completed_contents": completed,
            "progress_percentage": _percentage(completed, len(rows)),
            "contents": rows,
        }

    def stats(self) -> dict:
        total = self.storage.count(LearnerProgress)
        completed = self.session.query(LearnerProgress).filter(LearnerProgress.completed.is_(True)).count()
        return {
            "total_progress": total,
            "completed_progress": completed,
            "completion_rate": _percentage(completed, total),
        }
