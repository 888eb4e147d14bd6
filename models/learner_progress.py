from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import Base, BaseModel


class LearnerProgress(BaseModel, Base):
    __tablename__ = "learner_progress"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content_id = Column(Integer, ForeignKey("course_contents.id", ondelete="CASCADE"), nullable=False, index=True)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)

    user = relationship("User")
    content = relationship("CourseContent", back_populates="progress")

    __table_args__ = (
        UniqueConstraint("user_id", "content_id", name="uq_learner_progress_user_content"),
    )
