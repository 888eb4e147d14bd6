from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.schemas.message import ConversationOutSchema, MessageCreateSchema, MessageOutSchema
from services import get_services
from utils.decorators import jwt_required
from utils.pagination import page_meta, parse_int_arg, parse_pagination

bp = Blueprint("messages", __name__, url_prefix="/messages")

message_create_schema = MessageCreateSchema()
message_out_schema = MessageOutSchema()
message_list_out_schema = MessageOutSchema(many=True)
conversation_list_out_schema = ConversationOutSchema(many=True)


@bp.post("")
@jwt_required()
def send_message(current_user):
    """
    Send a direct message
    ---
    tags:
      - Messages
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [receiver_id, content]
          properties:
            receiver_id: { type: integer }
            content: { type: string }
    responses:
      201: { description: Created }
      404: { description: Receiver not found }
    """
    payload = request.get_json(silent=True) or {}
    data = message_create_schema.load(payload)
    message = get_services().messages.send(current_user.id, data["receiver_id"], data["content"])
    return jsonify({"data": message_out_schema.dump(message)}), 201


@bp.get("")
@jwt_required()
def list_messages(current_user):
    """
    The caller's messages, newest first
    ---
    tags:
      - Messages
    security:
      - Bearer: []
    parameters:
      - { in: query, name: conversation_with, type: integer, description: Only messages exchanged with this user }
      - { in: query, name: page, type: integer }
      - { in: query, name: limit, type: integer }
    responses:
      200: { description: OK }
    """
    page, limit = parse_pagination(default_limit=20)
    rows, total = get_services().messages.list(
        current_user.id, page, limit, conversation_with=parse_int_arg("conversation_with")
    )
    return jsonify({"data": message_list_out_schema.dump(rows), "meta": page_meta(page, limit, total)}), 200


@bp.get("/conversations")
@jwt_required()
def conversations(current_user):
    """
    One entry per correspondent with the last message and unread count
    ---
    tags:
      - Messages
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    rows = get_services().messages.conversations(current_user.id)
    return jsonify({"data": conversation_list_out_schema.dump(rows)}), 200


@bp.get("/unread-count")
@jwt_required()
def unread_count(current_user):
    """
    Number of unread messages addressed to the caller
    ---
    tags:
      - Messages
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return jsonify({"data": {"count": get_services().messages.unread_count(current_user.id)}}), 200


@bp.patch("/conversation/<int:user_id>/read")
@jwt_required()
def mark_conversation_read(user_id: int, current_user):
    """
    Mark everything received from a user as read
    ---
    tags:
      - Messages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
    responses:
      200: { description: OK }
    """
    updated = get_services().messages.mark_conversation_read(current_user.id, user_id)
    return jsonify({"data": {"updated": updated}}), 200


@bp.get("/<int:message_id>")
@jwt_required()
def get_message(message_id: int, current_user):
    """
    Get a message (sender or receiver only)
    ---
    tags:
      - Messages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: message_id, type: integer, required: true }
    responses:
      200: { description: OK }
      403: { description: Not a participant }
      404: { description: Not found }
    """
    message = get_services().messages.get(message_id, current_user.id)
    return jsonify({"data": message_out_schema.dump(message)}), 200


@bp.patch("/<int:message_id>/read")
@jwt_required()
def mark_message_read(message_id: int, current_user):
    """
    Mark a message as read (receiver only)
    ---
    tags:
      - Messages
    security:
      - Bearer: []
    parameters:
      - { in: path, name: message_id, type: integer, required: true }
    responses:
      200: { description: OK }
      403: { description: Only the receiver can mark a message as read }
      404: { description: Not found }
    """
    message = get_services().messages.mark_read(message_id, current_user.id)
    return jsonify({"data": message_out_schema.dump(message)}), 200
