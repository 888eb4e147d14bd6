from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel


class SessionStatus(str, Enum):
    PLANNED = "planned"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELED = "canceled"


SESSION_STATUS_VALUES = [s.value for s in SessionStatus]


class CourseSession(BaseModel, Base):
    __tablename__ = "course_sessions"

    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=True)
    status = Column(
        SAEnum(*SESSION_STATUS_VALUES, name="session_status", native_enum=False),
        nullable=False,
        default=SessionStatus.PLANNED.value,
    )

    course = relationship("Course", back_populates="sessions")
    trainer = relationship("User")
    enrollments = relationship(
        "Enrollment",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
