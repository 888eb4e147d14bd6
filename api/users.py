from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.schemas.user import ProfileUpdateSchema, UserCreateSchema, UserOutSchema, UserUpdateSchema
from models.user import ROLE_VALUES
from services import get_services
from utils.decorators import jwt_required, roles_required
from utils.pagination import page_meta, parse_choice_arg, parse_pagination

bp = Blueprint("users", __name__, url_prefix="/users")

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
profile_update_schema = ProfileUpdateSchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


@bp.post("")
@roles_required(["admin"])
def create_user(current_user):
    """
    Create a user with any role (admin)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password, first_name, last_name]
          properties:
            email: { type: string }
            password: { type: string }
            first_name: { type: string }
            last_name: { type: string }
            role: { type: string, enum: [admin, trainer, learner] }
            bio: { type: string }
            avatar_url: { type: string }
            certifications: { type: string }
    responses:
      201: { description: Created }
      409: { description: Email already registered }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    user = get_services().users.create(data)
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.get("")
@roles_required(["admin", "trainer"])
def list_users(current_user):
    """
    List users, newest first (admin, trainer)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: query, name: role, type: string, enum: [admin, trainer, learner] }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination()
    role = parse_choice_arg("role", ROLE_VALUES)
    rows, total = get_services().users.list(page, limit, role=role)
    return jsonify({"data": user_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/me")
@jwt_required()
def get_me(current_user):
    """
    Current user's profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    user = get_services().users.get(current_user.id)
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.patch("/me")
@jwt_required()
def update_me(current_user):
    """
    Update own profile (role cannot be changed here)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            first_name: { type: string }
            last_name: { type: string }
            email: { type: string }
            password: { type: string }
            bio: { type: string }
            avatar_url: { type: string }
            certifications: { type: string }
    responses:
      200: { description: OK }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = profile_update_schema.load(payload)
    user = get_services().users.update(current_user.id, data)
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.get("/stats")
@roles_required(["admin"])
def user_stats(current_user):
    """
    User counts by role (admin)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": get_services().users.stats()}), 200


@bp.get("/<int:user_id>")
@jwt_required()
def get_user(user_id: int, current_user):
    """
    Get a user by id
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    user = get_services().users.get(user_id)
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.patch("/<int:user_id>")
@roles_required(["admin"])
def update_user(user_id: int, current_user):
    """
    Update any user, including the role (admin)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            role: { type: string, enum: [admin, trainer, learner] }
            first_name: { type: string }
            last_name: { type: string }
            email: { type: string }
    responses:
      200: { description: OK }
      404: { description: Not found }
      409: { description: Email already registered }
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)
    user = get_services().users.update(user_id, data)
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.delete("/<int:user_id>")
@roles_required(["admin"])
def delete_user(user_id: int, current_user):
    """
    Delete a user (admin)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    get_services().users.delete(user_id)
    return ("", 204)
