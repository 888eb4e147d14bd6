from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.course_session import SESSION_STATUS_VALUES
from models.schemas.course_session import (
    CourseSessionCreateSchema,
    CourseSessionDetailSchema,
    CourseSessionUpdateSchema,
    SessionStatusSchema,
)
from services import get_services
from utils.decorators import jwt_required, roles_required
from utils.pagination import page_meta, parse_choice_arg, parse_int_arg, parse_pagination

bp = Blueprint("course_sessions", __name__, url_prefix="/course-sessions")

session_create_schema = CourseSessionCreateSchema()
session_update_schema = CourseSessionUpdateSchema()
session_status_schema = SessionStatusSchema()
session_out_schema = CourseSessionDetailSchema()
session_list_out_schema = CourseSessionDetailSchema(many=True)


@bp.post("")
@roles_required(["admin", "trainer"])
def create_session(current_user):
    """
    Schedule a session of a course
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [course_id, trainer_id, start_date, end_date]
          properties:
            course_id: { type: integer }
            trainer_id: { type: integer }
            start_date: { type: string, format: date-time }
            end_date: { type: string, format: date-time }
            location: { type: string }
            status: { type: string, enum: [planned, ongoing, completed, canceled] }
    responses:
      201: { description: Created }
      400: { description: Invalid trainer or dates }
      404: { description: Course not found }
    """
    payload = request.get_json(silent=True) or {}
    data = session_create_schema.load(payload)
    session = get_services().sessions.create(data)
    return jsonify({"data": session_out_schema.dump(session)}), 201


@bp.get("")
@jwt_required()
def list_sessions(current_user):
    """
    List sessions, latest start first
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    parameters:
      - { in: query, name: status, type: string, enum: [planned, ongoing, completed, canceled] }
      - { in: query, name: course_id, type: integer }
      - { in: query, name: trainer_id, type: integer }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    rows, total = get_services().sessions.list(
        page,
        limit,
        status=parse_choice_arg("status", SESSION_STATUS_VALUES),
        course_id=parse_int_arg("course_id"),
        trainer_id=parse_int_arg("trainer_id"),
    )
    return jsonify({"data": session_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/my-sessions")
@roles_required(["trainer"])
def my_sessions(current_user):
    """
    Sessions taught by the calling trainer
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    rows, total = get_services().sessions.list(page, limit, trainer_id=current_user.id)
    return jsonify({"data": session_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/stats")
@roles_required(["admin"])
def session_stats(current_user):
    """
    Session counts by status (admin)
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": get_services().sessions.stats()}), 200


@bp.get("/<int:session_id>")
@jwt_required()
def get_session(session_id: int, current_user):
    """
    Get a session
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    parameters:
      - { in: path, name: session_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    session = get_services().sessions.get(session_id)
    return jsonify({"data": session_out_schema.dump(session)}), 200


@bp.patch("/<int:session_id>")
@roles_required(["admin", "trainer"])
def update_session(session_id: int, current_user):
    """
    Update a session; dates are checked against the stored values
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: session_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            trainer_id: { type: integer }
            start_date: { type: string, format: date-time }
            end_date: { type: string, format: date-time }
            location: { type: string }
            status: { type: string }
    responses:
      200: { description: OK }
      400: { description: Invalid trainer or dates }
      404: { description: Not found }
    """
    payload = request.get_json(silent=True) or {}
    data = session_update_schema.load(payload)
    session = get_services().sessions.update(session_id, data)
    return jsonify({"data": session_out_schema.dump(session)}), 200


@bp.patch("/<int:session_id>/status")
@roles_required(["admin", "trainer"])
def update_session_status(session_id: int, current_user):
    """
    Change only the status of a session
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: session_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            status: { type: string, enum: [planned, ongoing, completed, canceled] }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    payload = request.get_json(silent=True) or {}
    data = session_status_schema.load(payload)
    session = get_services().sessions.update_status(session_id, data["status"])
    return jsonify({"data": session_out_schema.dump(session)}), 200


@bp.delete("/<int:session_id>")
@roles_required(["admin"])
def delete_session(session_id: int, current_user):
    """
    Delete a session and its enrollments (admin)
    ---
    tags:
      - Course Sessions
    security:
      - Bearer: []
    parameters:
      - { in: path, name: session_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    get_services().sessions.delete(session_id)
    return ("", 204)
