from enum import Enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel


class ContentType(str, Enum):
    PDF = "pdf"
    VIDEO = "video"
    QUIZ = "quiz"
    URL = "url"
    TEXT = "text"


CONTENT_TYPE_VALUES = [t.value for t in ContentType]


class CourseContent(BaseModel, Base):
    __tablename__ = "course_contents"

    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(SAEnum(*CONTENT_TYPE_VALUES, name="content_type", native_enum=False), nullable=False)
    title = Column(String(255), nullable=False)
    # URL for media types, the body itself for text
    content_url = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False)

    course = relationship("Course", back_populates="contents")
    progress = relationship(
        "LearnerProgress",
        back_populates="content",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("course_id", "order_index", name="uq_course_contents_course_order"),
        # reorder parks rows on negative indexes while swapping
        CheckConstraint("order_index <> 0", name="ck_course_contents_order_nonzero"),
    )
