from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.schemas.notification import NotificationCreateSchema, NotificationOutSchema
from models.user import UserRole
from services import get_services
from utils.decorators import jwt_required, roles_required
from utils.pagination import page_meta, parse_bool_arg, parse_pagination

bp = Blueprint("notifications", __name__, url_prefix="/notifications")

notification_create_schema = NotificationCreateSchema()
notification_out_schema = NotificationOutSchema()
notification_list_out_schema = NotificationOutSchema(many=True)


@bp.post("")
@roles_required(["admin"])
def create_notification(current_user):
    """
    Send a notification to a user (admin)
    ---
    tags:
      - Notifications
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [user_id, title, message]
          properties:
            user_id: { type: integer }
            title: { type: string }
            message: { type: string }
    responses:
      201: { description: Created }
      404: { description: User not found }
    """
    payload = request.get_json(silent=True) or {}
    data = notification_create_schema.load(payload)
    notification = get_services().notifications.create(data)
    return jsonify({"data": notification_out_schema.dump(notification)}), 201


@bp.get("")
@jwt_required()
def list_notifications(current_user):
    """
    The caller's notifications, newest first
    ---
    tags:
      - Notifications
    security:
      - Bearer: []
    parameters:
      - { in: query, name: unread_only, type: boolean }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination(default_limit=20)
    rows, total = get_services().notifications.list_for_user(
        current_user.id, page, limit, unread_only=parse_bool_arg("unread_only")
    )
    return jsonify({"data": notification_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/unread-count")
@jwt_required()
def unread_count(current_user):
    """
    Number of unread notifications
    ---
    tags:
      - Notifications
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": {"count": get_services().notifications.unread_count(current_user.id)}}), 200


@bp.patch("/mark-all-read")
@jwt_required()
def mark_all_read(current_user):
    """
    Mark every notification of the caller as read
    ---
    tags:
      - Notifications
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    updated = get_services().notifications.mark_all_read(current_user.id)
    return jsonify({"data": {"updated": updated}}), 200


@bp.get("/<int:notification_id>")
@jwt_required()
def get_notification(notification_id: int, current_user):
    """
    Get one of the caller's notifications
    ---
    tags:
      - Notifications
    security:
      - Bearer: []
    parameters:
      - { in: path, name: notification_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    notification = get_services().notifications.get_owned(notification_id, current_user.id)
    return jsonify({"data": notification_out_schema.dump(notification)}), 200


@bp.patch("/<int:notification_id>/read")
@jwt_required()
def mark_read(notification_id: int, current_user):
    """
    Mark one notification as read
    ---
    tags:
      - Notifications
    security:
      - Bearer: []
    parameters:
      - { in: path, name: notification_id, type: integer, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    notification = get_services().notifications.mark_read(notification_id, current_user.id)
    return jsonify({"data": notification_out_schema.dump(notification)}), 200


@bp.delete("/<int:notification_id>")
@jwt_required()
def delete_notification(notification_id: int, current_user):
    """
    Delete a notification (owner or admin)
    ---
    tags:
      - Notifications
    security:
      - Bearer: []
    parameters:
      - { in: path, name: notification_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      403: { description: Not your notification }
      404: { description: Not found }
    """
    get_services().notifications.delete(
        notification_id, current_user.id, is_admin=current_user.role == UserRole.ADMIN.value
    )
    return ("", 204)
