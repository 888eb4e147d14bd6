from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, or_

from models.course import LEVEL_VALUES, Course
from services.base import StorageService
from utils.exceptions import BadRequestError, NotFoundError

SLUG_TAKEN = "A course with this title already exists"

COURSE_FIELDS = ("title", "description", "level", "price", "duration", "thumbnail_url")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lowercase, runs of anything outside [a-z0-9] become one '-', no leading/trailing '-'."""
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


class CourseService(StorageService):
    def _slug_for(self, title: str) -> str:
        slug = slugify(title)
        if not slug:
            raise BadRequestError("Title must contain at least one letter or digit")
        return slug

    def create(self, data: dict) -> Course:
        course = Course(slug=self._slug_for(data["title"]))
        course.update(data, COURSE_FIELDS)
        return self.add(course, SLUG_TAKEN)

    def list(self, page: int, limit: int, level: Optional[str] = None, search: Optional[str] = None):
        query = self.session.query(Course)
        if level:
            query = query.filter(Course.level == level)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Course.title).like(pattern),
                func.lower(Course.description).like(pattern),
            ))
        query = query.order_by(Course.created_at.desc(), Course.id.desc())
        return self.paginate(query, page, limit)

    def get(self, course_id: int) -> Course:
        return self.get_or_404(Course, course_id, "Course not found")

    def get_by_slug(self, slug: str) -> Course:
        course = self.session.query(Course).filter(Course.slug == slug).first()
        if course is None:
            raise NotFoundError("Course not found")
        return course

    def update(self, course_id: int, data: dict) -> Course:
        course = self.get(course_id)
        course.update(data, COURSE_FIELDS)
        if data.get("title"):
            course.slug = self._slug_for(data["title"])
        self.commit(SLUG_TAKEN)
        return course

    def delete(self, course_id: int) -> None:
        self.remove(self.get(course_id))

    def stats(self) -> dict:
        by_level = {
            level: self.session.query(Course).filter(Course.level == level).count()
            for level in LEVEL_VALUES
        }
        revenue = self.session.query(func.coalesce(func.sum(Course.price), 0)).scalar()
        return {
            "total": self.storage.count(Course),
            "by_level": by_level,
            "total_revenue": str(Decimal(str(revenue or 0)).quantize(Decimal("0.01"))),
        }
