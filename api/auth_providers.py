from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.schemas.auth_provider import AuthProviderCreateSchema, AuthProviderOutSchema
from models.user import UserRole
from services import get_services
from utils.decorators import jwt_required, roles_required

bp = Blueprint("auth_providers", __name__, url_prefix="/auth-providers")

provider_create_schema = AuthProviderCreateSchema()
provider_out_schema = AuthProviderOutSchema()
provider_list_out_schema = AuthProviderOutSchema(many=True)


@bp.post("")
@roles_required(["admin"])
def link_provider(current_user):
    """
    Link an external identity to a user (admin)
    ---
    tags:
      - Auth Providers
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [user_id, provider, provider_id]
          properties:
            user_id: { type: integer }
            provider: { type: string, enum: [google, facebook, github] }
            provider_id: { type: string }
    responses:
      201: { description: Created }
      404: { description: User not found }
      409: { description: Identity already linked }
    """
    payload = request.get_json(silent=True) or {}
    data = provider_create_schema.load(payload)
    link = get_services().auth_providers.create(data)
    return jsonify({"data": provider_out_schema.dump(link)}), 201


@bp.get("/my-providers")
@jwt_required()
def my_providers(current_user):
    """
    External identities linked to the caller
    ---
    tags:
      - Auth Providers
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    rows = get_services().auth_providers.for_user(current_user.id)
    return jsonify({"data": provider_list_out_schema.dump(rows)}), 200


@bp.delete("/<int:provider_id>")
@jwt_required()
def unlink_provider(provider_id: int, current_user):
    """
    Unlink an external identity (owner or admin)
    ---
    tags:
      - Auth Providers
    security:
      - Bearer: []
    parameters:
      - { in: path, name: provider_id, type: integer, required: true }
    responses:
      204: { description: Deleted }
      403: { description: Not your identity }
      404: { description: Not found }
    """
    get_services().auth_providers.delete(
        provider_id, current_user.id, is_admin=current_user.role == UserRole.ADMIN.value
    )
    return ("", 204)
