from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.course import LEVEL_VALUES
from models.schemas.course import CourseCreateSchema, CourseDetailSchema, CourseOutSchema, CourseUpdateSchema
from services import get_services
from utils.decorators import jwt_required, roles_required
from utils.pagination import page_meta, parse_choice_arg, parse_pagination

bp = Blueprint("courses", __name__, url_prefix="/courses")

course_create_schema = CourseCreateSchema()
course_update_schema = CourseUpdateSchema()
course_out_schema = CourseOutSchema()
course_detail_schema = CourseDetailSchema()
course_list_out_schema = CourseOutSchema(many=True)


@bp.post("")
@roles_required(["admin", "trainer"])
def create_course(current_user):
    """
    Create a course; the slug is derived from the title
    ---
    tags:
      - Courses
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [title, level, price]
          properties:
            title: { type: string }
            description: { type: string }
            level: { type: string, enum: [beginner, intermediate, advanced] }
            price: { type: number }
            duration: { type: string }
            thumbnail_url: { type: string }
    responses:
      201: { description: Created }
      409: { description: A course with this title already exists }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = course_create_schema.load(payload)
    course = get_services().courses.create(data)
    return jsonify({"data": course_out_schema.dump(course)}), 201


@bp.get("")
@jwt_required()
def list_courses(current_user):
    """
    List courses, newest first
    ---
    tags:
      - Courses
    security:
      - Bearer: []
    parameters:
      - { in: query, name: level, type: string, enum: [beginner, intermediate, advanced] }
      - { in: query, name: search, type: string, description: Case-insensitive match on title or description }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    level = parse_choice_arg("level", LEVEL_VALUES)
    search = (request.args.get("search") or "").strip() or None
    rows, total = get_services().courses.list(page, limit, level=level, search=search)
    return jsonify({"data": course_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/stats")
@roles_required(["admin"])
def course_stats(current_user):
    """
    Course counts by level and total revenue (admin)
    ---
    tags:
      - Courses
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": get_services().courses.stats()}), 200


@bp.get("/slug/<string:slug>")
@jwt_required()
def get_course_by_slug(slug: str, current_user):
    """
    Get a course by slug, with sessions and ordered contents
    ---
    tags:
      - Courses
    security:
      - Bearer: []
    parameters:
      - { in: path, name: slug, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    course = get_services().courses.get_by_slug(slug)
    return jsonify({"data": course_detail_schema.dump(course)}), 200


@bp.get("/<int:course_id>")
@jwt_required()
def get_course(course_id: int, current_user):
    """
    Get a course by id, with sessions and ordered contents
    ---
    tags:
      - Courses
    security:
      - Bearer: []
    parameters:
      - { in: path, name: course_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    course = get_services().courses.get(course_id)
    return jsonify({"data": course_detail_schema.dump(course)}), 200


@bp.patch("/<int:course_id>")
@roles_required(["admin", "trainer"])
def update_course(course_id: int, current_user):
    """
    Update a course; a new title re-derives the slug
    ---
    tags:
      - Courses
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
            title: { type: string }
            description: { type: string }
            level: { type: string }
            price: { type: number }
    responses:
      200: { description: OK }
      404: { description: Not found }
      409: { description: A course with this title already exists }
    """
    payload = request.get_json(silent=True) or {}
    data = course_update_schema.load(payload)
    course = get_services().courses.update(course_id, data)
    return jsonify({"data": course_out_schema.dump(course)}), 200


@bp.delete("/<int:course_id>")
@roles_required(["admin"])
def delete_course(course_id: int, current_user):
    """
    Delete a course with its sessions and contents (admin)
    ---
    tags:
      - Courses
    security:
      - Bearer: []
    parameters:
      - { in: path, name: course_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    get_services().courses.delete(course_id)
    return ("", 204)
