from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.enrollment import ENROLLMENT_STATUS_VALUES
from models.schemas.enrollment import EnrollmentCreateSchema, EnrollmentOutSchema, EnrollmentUpdateSchema
from services import get_services
from utils.decorators import jwt_required, roles_required
from utils.pagination import page_meta, parse_choice_arg, parse_int_arg, parse_pagination

bp = Blueprint("enrollments", __name__, url_prefix="/enrollments")

enrollment_create_schema = EnrollmentCreateSchema()
enrollment_update_schema = EnrollmentUpdateSchema()
enrollment_out_schema = EnrollmentOutSchema()
enrollment_list_out_schema = EnrollmentOutSchema(many=True)


@bp.post("")
@jwt_required()
def create_enrollment(current_user):
    """
    Enroll the caller in a session (status pending)
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [session_id]
          properties:
            session_id: { type: integer }
    responses:
      201: { description: Created }
      404: { description: Session not found }
      409: { description: Already enrolled in this session }
    """
    payload = request.get_json(silent=True) or {}
    data = enrollment_create_schema.load(payload)
    enrollment = get_services().enrollments.create(current_user.id, data["session_id"])
    return jsonify({"data": enrollment_out_schema.dump(enrollment)}), 201


@bp.get("")
@roles_required(["admin", "trainer"])
def list_enrollments(current_user):
    """
    List enrollments, newest first (admin, trainer)
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    parameters:
      - { in: query, name: status, type: string, enum: [pending, confirmed, canceled] }
      - { in: query, name: session_id, type: integer }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    rows, total = get_services().enrollments.list(
        page,
        limit,
        status=parse_choice_arg("status", ENROLLMENT_STATUS_VALUES),
        session_id=parse_int_arg("session_id"),
    )
    return jsonify({"data": enrollment_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/my-enrollments")
@jwt_required()
def my_enrollments(current_user):
    """
    The caller's enrollments
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    rows, total = get_services().enrollments.list(page, limit, user_id=current_user.id)
    return jsonify({"data": enrollment_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/stats")
@roles_required(["admin"])
def enrollment_stats(current_user):
    """
    Enrollment counts by status (admin)
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": get_services().enrollments.stats()}), 200


@bp.get("/<int:enrollment_id>")
@jwt_required()
def get_enrollment(enrollment_id: int, current_user):
    """
    Get an enrollment (owner, admin or trainer)
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: enrollment_id, type: integer, required: true }
    responses:
      200: { description: OK }
      403: { description: Not your enrollment }
      404: { description: Not found }
    """
    enrollment = get_services().enrollments.get_visible(enrollment_id, current_user.id, current_user.role)
    return jsonify({"data": enrollment_out_schema.dump(enrollment)}), 200


@bp.patch("/<int:enrollment_id>/confirm")
@roles_required(["admin", "trainer"])
def confirm_enrollment(enrollment_id: int, current_user):
    """
    Confirm an enrollment and notify the learner
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: enrollment_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    enrollment = get_services().enrollments.confirm(enrollment_id)
    return jsonify({"data": enrollment_out_schema.dump(enrollment)}), 200


@bp.patch("/<int:enrollment_id>/cancel")
@jwt_required()
def cancel_enrollment(enrollment_id: int, current_user):
    """
    Cancel an enrollment (owner, admin or trainer)
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: enrollment_id, type: integer, required: true }
    responses:
      200: { description: OK }
      403: { description: Not your enrollment }
      404: { description: Not found }
    """
    enrollment = get_services().enrollments.cancel(enrollment_id, current_user.id, current_user.role)
    return jsonify({"data": enrollment_out_schema.dump(enrollment)}), 200


@bp.patch("/<int:enrollment_id>")
@roles_required(["admin", "trainer"])
def update_enrollment(enrollment_id: int, current_user):
    """
    Set the status of an enrollment
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: enrollment_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            status: { type: string, enum: [pending, confirmed, canceled] }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    payload = request.get_json(silent=True) or {}
    data = enrollment_update_schema.load(payload)
    enrollment = get_services().enrollments.update(enrollment_id, data["status"])
    return jsonify({"data": enrollment_out_schema.dump(enrollment)}), 200


@bp.delete("/<int:enrollment_id>")
@roles_required(["admin"])
def delete_enrollment(enrollment_id: int, current_user):
    """
    Delete an enrollment (admin)
    ---
    tags:
      - Enrollments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: enrollment_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    get_services().enrollments.delete(enrollment_id)
    return ("", 204)
