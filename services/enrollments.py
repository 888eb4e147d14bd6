from __future__ import annotations

from typing import Optional

from models.course_session import CourseSession
from models.enrollment import ENROLLMENT_STATUS_VALUES, Enrollment, EnrollmentStatus
from models.user import UserRole
from services.base import StorageService
from services.email import EmailDispatcher
from services.notifications import NotificationService
from utils.exceptions import EmailDeliveryError, ForbiddenError
from utils.logger import get_logger

logger = get_logger(__name__)

STAFF_ROLES = (UserRole.ADMIN.value, UserRole.TRAINER.value)


class EnrollmentService(StorageService):
    def __init__(self, storage, notifications: NotificationService, mailer: EmailDispatcher):
        super().__init__(storage)
        self.notifications = notifications
        self.mailer = mailer

    def create(self, user_id: int, session_id: int) -> Enrollment:
        session = self.get_or_404(CourseSession, session_id, "Session not found")
        enrollment = self.add(
            Enrollment(user_id=user_id, session_id=session_id, status=EnrollmentStatus.PENDING.value),
            "Already enrolled in this session",
        )
        self._send_confirmation(enrollment, session)
        return enrollment

    def _send_confirmation(self, enrollment: Enrollment, session: CourseSession) -> None:
        user = enrollment.user
        context = {
            "first_name": user.first_name,
            "course_name": session.course.title,
            "start_date": session.start_date.strftime("%Y-%m-%d"),
            "end_date": session.end_date.strftime("%Y-%m-%d"),
            "location": session.location or "Online",
        }
        try:
            self.mailer.send(user.email, "enrollment_confirmation", context)
        except EmailDeliveryError as exc:
            logger.error("Enrollment %s saved but confirmation email failed: %s", enrollment.id, exc)

    def list(self, page: int, limit: int, status: Optional[str] = None,
             session_id: Optional[int] = None, user_id: Optional[int] = None):
        query = self.session.query(Enrollment)
        if status:
            query = query.filter(Enrollment.status == status)
        if session_id is not None:
            query = query.filter(Enrollment.session_id == session_id)
        if user_id is not None:
            query = query.filter(Enrollment.user_id == user_id)
        query = query.order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
        return self.paginate(query, page, limit)

    def get(self, enrollment_id: int) -> Enrollment:
        return self.get_or_404(Enrollment, enrollment_id, "Enrollment not found")

    def get_visible(self, enrollment_id: int, user_id: int, role: str) -> Enrollment:
        enrollment = self.get(enrollment_id)
        if enrollment.user_id != user_id and role not in STAFF_ROLES:
            raise ForbiddenError("You can only view your own enrollments")
        return enrollment

    def update(self, enrollment_id: int, status: str) -> Enrollment:
        enrollment = self.get(enrollment_id)
        enrollment.status = status
        self.commit()
        return enrollment

    def confirm(self, enrollment_id: int) -> Enrollment:
        enrollment = self.update(enrollment_id, EnrollmentStatus.CONFIRMED.value)
        self.notifications.create_for_user(
            enrollment.user_id,
            "Enrollment Confirmed",
            f'Your enrollment in "{enrollment.session.course.title}" has been confirmed!',
        )
        return enrollment

    def cancel(self, enrollment_id: int, user_id: int, role: str) -> Enrollment:
        enrollment = self.get_visible(enrollment_id, user_id, role)
        enrollment.status = EnrollmentStatus.CANCELED.value
        self.commit()
        return enrollment

    def delete(self, enrollment_id: int) -> None:
        self.remove(self.get(enrollment_id))

    def stats(self) -> dict:
        by_status = {
            status: self.session.query(Enrollment).filter(Enrollment.status == status).count()
            for status in ENROLLMENT_STATUS_VALUES
        }
        return {"total": self.storage.count(Enrollment), "by_status": by_status}
