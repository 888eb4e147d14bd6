from __future__ import annotations

from typing import Optional

from models.course import Course
from models.course_session import SESSION_STATUS_VALUES, CourseSession
from models.user import User, UserRole
from services.base import StorageService
from utils.exceptions import BadRequestError

SESSION_FIELDS = ("course_id", "trainer_id", "start_date", "end_date", "location", "status")


class CourseSessionService(StorageService):
    def _check_trainer(self, trainer_id: int) -> User:
        trainer = self.storage.get(User, trainer_id)
        if trainer is None or trainer.role != UserRole.TRAINER.value:
            raise BadRequestError("Invalid trainer")
        return trainer

    @staticmethod
    def _check_dates(start_date, end_date) -> None:
        if start_date >= end_date:
            raise BadRequestError("Start date must be before end date")

    def create(self, data: dict) -> CourseSession:
        self.get_or_404(Course, data["course_id"], "Course not found")
        self._check_trainer(data["trainer_id"])
        self._check_dates(data["start_date"], data["end_date"])
        session = CourseSession()
        session.update(data, SESSION_FIELDS)
        return self.add(session)

    def list(self, page: int, limit: int, status: Optional[str] = None,
             course_id: Optional[int] = None, trainer_id: Optional[int] = None):
        query = self.session.query(CourseSession)
        if status:
            query = query.filter(CourseSession.status == status)
        if course_id is not None:
            query = query.filter(CourseSession.course_id == course_id)
        if trainer_id is not None:
            query = query.filter(CourseSession.trainer_id == trainer_id)
        query = query.order_by(CourseSession.start_date.desc(), CourseSession.id.desc())
        return self.paginate(query, page, limit)

    def get(self, session_id: int) -> CourseSession:
        return self.get_or_404(CourseSession, session_id, "Course session not found")

    def update(self, session_id: int, data: dict) -> CourseSession:
        session = self.get(session_id)
        if "trainer_id" in data:
            self._check_trainer(data["trainer_id"])
        # a single new date is checked against the stored one
        self._check_dates(data.get("start_date", session.start_date), data.get("end_date", session.end_date))
        session.update(data, SESSION_FIELDS)
        self.commit()
        return session

    def update_status(self, session_id: int, status: str) -> CourseSession:
        return self.update(session_id, {"status": status})

    def delete(self, session_id: int) -> None:
        self.remove(self.get(session_id))

    def stats(self) -> dict:
        by_status = {
            status: self.session.query(CourseSession).filter(CourseSession.status == status).count()
            for status in SESSION_STATUS_VALUES
        }
        return {"total": self.storage.count(CourseSession), "by_status": by_status}
