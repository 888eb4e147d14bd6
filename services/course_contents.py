from __future__ import annotations

from typing import List, Optional

from models.course import Course
from models.course_content import CONTENT_TYPE_VALUES, CourseContent
from services.base import StorageService
from utils.exceptions import BadRequestError

ORDER_TAKEN = "Content with this order index already exists for this course"

CONTENT_FIELDS = ("course_id", "type", "title", "content_url", "order_index")


class CourseContentService(StorageService):
    def create(self, data: dict) -> CourseContent:
        self.get_or_404(Course, data["course_id"], "Course not found")
        content = CourseContent()
        content.update(data, CONTENT_FIELDS)
        return self.add(content, ORDER_TAKEN)

    def list(self, page: int, limit: int, course_id: Optional[int] = None, content_type: Optional[str] = None):
        query = self.session.query(CourseContent)
        if course_id is not None:
            query = query.filter(CourseContent.course_id == course_id)
        if content_type:
            query = query.filter(CourseContent.type == content_type)
        query = query.order_by(CourseContent.course_id.asc(), CourseContent.order_index.asc())
        return self.paginate(query, page, limit)

    def for_course(self, course_id: int) -> List[CourseContent]:
        self.get_or_404(Course, course_id, "Course not found")
        return (
            self.session.query(CourseContent)
            .filter(CourseContent.course_id == course_id)
            .order_by(CourseContent.order_index.asc())
            .all()
        )

    def get(self, content_id: int) -> CourseContent:
        return self.get_or_404(CourseContent, content_id, "Course content not found")

    def update(self, content_id: int, data: dict) -> CourseContent:
        content = self.get(content_id)
        content.update(data, ("type", "title", "content_url", "order_index"))
        self.commit(ORDER_TAKEN)
        return content

    def delete(self, content_id: int) -> None:
        self.remove(self.get(content_id))

    def reorder(self, course_id: int, content_orders: List[dict]) -> List[CourseContent]:
        """Apply ``[{id, order_index}, ...]`` to a course's contents in one commit.

        Rows are first parked on distinct negative indexes so the
        (course_id, order_index) unique constraint holds at every flush.
        """
        self.get_or_404(Course, course_id, "Course not found")
        wanted = {item["id"]: item["order_index"] for item in content_orders}
        rows = (
            self.session.query(CourseContent)
            .filter(CourseContent.id.in_(wanted.keys()), CourseContent.course_id == course_id)
            .all()
        )
        missing = set(wanted) - {row.id for row in rows}
        if missing:
            raise BadRequestError(
                "All contents must belong to the course",
                details={"content_ids": sorted(missing)},
            )

        for position, row in enumerate(rows, start=1):
            row.order_index = -position
        self.storage.flush()
        for row in rows:
            row.order_index = wanted[row.id]
        self.commit(ORDER_TAKEN)
        return self.for_course(course_id)

    def stats(self) -> dict:
        by_type = {
            content_type: self.session.query(CourseContent).filter(CourseContent.type == content_type).count()
            for content_type in CONTENT_TYPE_VALUES
        }
        return {"total": self.storage.count(CourseContent), "by_type": by_type}
