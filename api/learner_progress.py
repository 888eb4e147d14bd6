from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.schemas.learner_progress import (
    LearnerProgressCreateSchema,
    LearnerProgressOutSchema,
    LearnerProgressUpdateSchema,
)
from services import get_services
from utils.decorators import jwt_required, roles_required
from utils.pagination import page_meta, parse_bool_arg, parse_int_arg, parse_pagination

bp = Blueprint("learner_progress", __name__, url_prefix="/learner-progress")

progress_create_schema = LearnerProgressCreateSchema()
progress_update_schema = LearnerProgressUpdateSchema()
progress_out_schema = LearnerProgressOutSchema()
progress_list_out_schema = LearnerProgressOutSchema(many=True)


@bp.post("")
@jwt_required()
def create_progress(current_user):
    """
    Record progress on a content item (learners only for themselves)
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [content_id]
          properties:
            user_id: { type: integer, description: Defaults to the caller }
            content_id: { type: integer }
            completed: { type: boolean }
    responses:
      201: { description: Created }
      403: { description: Learner recording progress for someone else }
      404: { description: Content or user not found }
      409: { description: Progress already exists for this content }
    """
    payload = request.get_json(silent=True) or {}
    data = progress_create_schema.load(payload)
    svc = get_services().progress
    user_id = data.get("user_id", current_user.id)
    svc.check_create_for(user_id, current_user.id, current_user.role)
    progress = svc.create(user_id, data["content_id"], completed=data["completed"])
    return jsonify({"data": progress_out_schema.dump(progress)}), 201


@bp.get("")
@roles_required(["admin", "trainer"])
def list_progress(current_user):
    """
    List progress records (admin, trainer)
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    parameters:
      - { in: query, name: user_id, type: integer }
      - { in: query, name: content_id, type: integer }
      - { in: query, name: completed, type: boolean }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    rows, total = get_services().progress.list(
        page,
        limit,
        user_id=parse_int_arg("user_id"),
        content_id=parse_int_arg("content_id"),
        completed=parse_bool_arg("completed"),
    )
    return jsonify({"data": progress_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/my-progress")
@jwt_required()
def my_progress(current_user):
    """
    The caller's progress records
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    rows, total = get_services().progress.list(page, limit, user_id=current_user.id)
    return jsonify({"data": progress_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/course/<int:course_id>/progress")
@jwt_required()
def course_progress(course_id: int, current_user):
    """
    The caller's completion summary for one course
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    parameters:
      - { in: path, name: course_id, type: integer, required: true }
    responses:
      200: { description: Totals, rounded percentage and one row per content }
      404: { description: Course not found }
    """
    summary = get_services().progress.course_progress(current_user.id, course_id)
    return jsonify({"data": summary}), 200


@bp.get("/stats")
@roles_required(["admin"])
def progress_stats(current_user):
    """
    Completion rate across all records (admin)
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": get_services().progress.stats()}), 200


@bp.post("/complete/<int:content_id>")
@jwt_required()
def complete_content(content_id: int, current_user):
    """
    Mark a content item completed for the caller, creating the record if needed
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    parameters:
      - { in: path, name: content_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Content not found }
    """
    progress = get_services().progress.mark_completed(current_user.id, content_id)
    return jsonify({"data": progress_out_schema.dump(progress)}), 200


@bp.get("/<int:progress_id>")
@jwt_required()
def get_progress(progress_id: int, current_user):
    """
    Get a progress record (owner, admin or trainer)
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    parameters:
      - { in: path, name: progress_id, type: integer, required: true }
    responses:
      200: { description: OK }
      403: { description: Not your record }
      404: { description: Not found }
    """
    progress = get_services().progress.get_visible(progress_id, current_user.id, current_user.role)
    return jsonify({"data": progress_out_schema.dump(progress)}), 200


@bp.patch("/<int:progress_id>")
@jwt_required()
def update_progress(progress_id: int, current_user):
    """
    Set the completed flag (owner, admin or trainer)
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: progress_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            completed: { type: boolean }
    responses:
      200: { description: OK }
      403: { description: Not your record }
      404: { description: Not found }
    """
    payload = request.get_json(silent=True) or {}
    data = progress_update_schema.load(payload)
    svc = get_services().progress
    svc.get_visible(progress_id, current_user.id, current_user.role)
    progress = svc.update(progress_id, data["completed"])
    return jsonify({"data": progress_out_schema.dump(progress)}), 200


@bp.delete("/<int:progress_id>")
@roles_required(["admin"])
def delete_progress(progress_id: int, current_user):
    """
    Delete a progress record (admin)
    ---
    tags:
      - Learner Progress
    security:
      - Bearer: []
    parameters:
      - { in: path, name: progress_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    get_services().progress.delete(progress_id)
    return ("", 204)
