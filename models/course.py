from enum import Enum

from sqlalchemy import CheckConstraint, Column, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import Base, BaseModel


class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


LEVEL_VALUES = [lvl.value for lvl in CourseLevel]


class Course(BaseModel, Base):
    __tablename__ = "courses"

    title = Column(String(255), nullable=False)
    # Derived from title; uniqueness is enforced here, not by a pre-check
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    level = Column(SAEnum(*LEVEL_VALUES, name="course_level", native_enum=False), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    duration = Column(String(50), nullable=True)
    thumbnail_url = Column(String(500), nullable=True)

    # Sessions and contents go with the course
    sessions = relationship(
        "CourseSession",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    contents = relationship(
        "CourseContent",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CourseContent.order_index",
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_courses_price_nonnegative"),
    )
