from enum import Enum

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel


class EnrollmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


ENROLLMENT_STATUS_VALUES = [s.value for s in EnrollmentStatus]


class Enrollment(BaseModel, Base):
    __tablename__ = "enrollments"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("course_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        SAEnum(*ENROLLMENT_STATUS_VALUES, name="enrollment_status", native_enum=False),
        nullable=False,
        default=EnrollmentStatus.PENDING.value,
    )

    user = relationship("User")
    session = relationship("CourseSession", back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("user_id", "session_id", name="uq_enrollments_user_session"),
    )
