"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/forgot-password
- POST /auth/reset-password
- POST /auth/logout
- GET  /auth/me

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, separate secrets)
- Stores refresh tokens in DB (RefreshToken model) so they can be revoked
- Validates access tokens statelessly in utils.decorators.jwt_required
"""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from models.schemas.auth import (
    ForgotPasswordSchema,
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
)
from services import get_services
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
forgot_password_schema = ForgotPasswordSchema()
reset_password_schema = ResetPasswordSchema()


@bp.post("/register")
def register():
    """
    Register a new learner account.
    ---
    tags:
      - Auth
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
    responses:
      201:
        description: Created (returns user, access_token, refresh_token)
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = register_schema.load(payload)
    result = get_services().auth.register(
        email=data["email"],
        password=data["password"],
        first_name=data["first_name"],
        last_name=data["last_name"],
    )
    return jsonify({"data": result}), 201


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)
    result = get_services().auth.login(data["email"], data["password"])
    return jsonify({"data": result}), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a stored refresh token for a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns access_token)
      401:
        description: Invalid refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_schema.load(payload)
    result = get_services().auth.refresh(data["refresh_token"])
    return jsonify({"data": result}), 200


@bp.post("/forgot-password")
def forgot_password():
    """
    Send a password reset code if the account exists
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
    responses:
      200:
        description: Same acknowledgement whether or not the email exists
    """
    payload = request.get_json(silent=True) or {}
    data = forgot_password_schema.load(payload)
    return jsonify({"data": get_services().auth.forgot_password(data["email"])}), 200


@bp.post("/reset-password")
def reset_password():
    """
    Reset the password with the emailed code; revokes every refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             otp: { type: integer }
             new_password: { type: string }
    responses:
      200:
        description: Password changed
      400:
        description: Invalid reset code
    """
    payload = request.get_json(silent=True) or {}
    data = reset_password_schema.load(payload)
    result = get_services().auth.reset_password(data["email"], data["otp"], data["new_password"])
    return jsonify({"data": result}), 200


@bp.post("/logout")
@jwt_required()
def logout(current_user):
    """
    Logout: revoke one refresh token, or all of the caller's tokens when none is given
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = logout_schema.load(payload)
    result = get_services().auth.logout(current_user.id, data.get("refresh_token"))
    return jsonify({"data": result}), 200


@bp.get("/me")
@jwt_required()
def me(current_user):
    """
    Claims of the current access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": current_user.to_dict()}), 200
