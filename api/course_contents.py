from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.course_content import CONTENT_TYPE_VALUES
from models.schemas.course_content import (
    CourseContentCreateSchema,
    CourseContentOutSchema,
    CourseContentUpdateSchema,
    ReorderContentSchema,
)
from services import get_services
from utils.decorators import jwt_required, roles_required
from utils.pagination import page_meta, parse_choice_arg, parse_int_arg, parse_pagination

bp = Blueprint("course_contents", __name__, url_prefix="/course-contents")

content_create_schema = CourseContentCreateSchema()
content_update_schema = CourseContentUpdateSchema()
reorder_schema = ReorderContentSchema()
content_out_schema = CourseContentOutSchema()
content_list_out_schema = CourseContentOutSchema(many=True)


@bp.post("")
@roles_required(["admin", "trainer"])
def create_content(current_user):
    """
    Add a content item to a course
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [course_id, type, title, order_index]
          properties:
            course_id: { type: integer }
            type: { type: string, enum: [pdf, video, quiz, url, text] }
            title: { type: string }
            content_url: { type: string }
            order_index: { type: integer }
    responses:
      201: { description: Created }
      404: { description: Course not found }
      409: { description: Order index already used in this course }
    """
    payload = request.get_json(silent=True) or {}
    data = content_create_schema.load(payload)
    content = get_services().contents.create(data)
    return jsonify({"data": content_out_schema.dump(content)}), 201


@bp.get("")
@jwt_required()
def list_contents(current_user):
    """
    List contents by course and order
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    parameters:
      - { in: query, name: course_id, type: integer }
      - { in: query, name: type, type: string, enum: [pdf, video, quiz, url, text] }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    rows, total = get_services().contents.list(
        page,
        limit,
        course_id=parse_int_arg("course_id"),
        content_type=parse_choice_arg("type", CONTENT_TYPE_VALUES),
    )
    return jsonify({"data": content_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/course/<int:course_id>")
@jwt_required()
def course_contents(course_id: int, current_user):
    """
    All contents of a course in order
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    parameters:
      - { in: path, name: course_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Course not found }
    """
    rows = get_services().contents.for_course(course_id)
    return jsonify({"data": content_list_out_schema.dump(rows)}), 200


@bp.get("/stats")
@roles_required(["admin"])
def content_stats(current_user):
    """
    Content counts by type (admin)
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": get_services().contents.stats()}), 200


@bp.patch("/reorder/<int:course_id>")
@roles_required(["admin", "trainer"])
def reorder_contents(course_id: int, current_user):
    """
    Reassign order indexes of a course's contents in one step
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: course_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            content_orders:
              type: array
              items:
                type: object
                properties:
                  id: { type: integer }
                  order_index: { type: integer }
    responses:
      200: { description: Contents in their new order }
      400: { description: A content id does not belong to the course }
      404: { description: Course not found }
    """
    payload = request.get_json(silent=True) or {}
    data = reorder_schema.load(payload)
    rows = get_services().contents.reorder(course_id, data["content_orders"])
    return jsonify({"data": content_list_out_schema.dump(rows)}), 200


@bp.get("/<int:content_id>")
@jwt_required()
def get_content(content_id: int, current_user):
    """
    Get a content item
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    parameters:
      - { in: path, name: content_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    content = get_services().contents.get(content_id)
    return jsonify({"data": content_out_schema.dump(content)}), 200


@bp.patch("/<int:content_id>")
@roles_required(["admin", "trainer"])
def update_content(content_id: int, current_user):
    """
    Update a content item
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: content_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            type: { type: string }
            title: { type: string }
            content_url: { type: string }
            order_index: { type: integer }
    responses:
      200: { description: OK }
      404: { description: Not found }
      409: { description: Order index already used in this course }
    """
    payload = request.get_json(silent=True) or {}
    data = content_update_schema.load(payload)
    content = get_services().contents.update(content_id, data)
    return jsonify({"data": content_out_schema.dump(content)}), 200


@bp.delete("/<int:content_id>")
@roles_required(["admin", "trainer"])
def delete_content(content_id: int, current_user):
    """
    Delete a content item
    ---
    tags:
      - Course Contents
    security:
      - Bearer: []
    parameters:
      - { in: path, name: content_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    get_services().contents.delete(content_id)
    return ("", 204)
