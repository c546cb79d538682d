"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs signed
  with separate secrets) through the app's TokenService
- Refresh tokens are stored so they can be rotated (single use) and revoked
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify
from marshmallow import ValidationError
from sqlalchemy import or_

from models import storage
from models.user import User
from models.schemas.user import UserCreateSchema, UserLoginSchema, UserSummarySchema

from utils.decorators import get_token_service
from utils.security import hash_password, verify_password
from utils.tokens import MissingToken, InvalidToken
from .errors import Conflict, InvalidInput, Unauthorized, Forbidden

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()
user_summary_schema = UserSummarySchema()


def _json_object() -> dict:
    """Request body as a dict; anything that is not a JSON object counts as empty."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _token_body(pair) -> dict:
    return {"access_token": pair.access_token, "refresh_token": pair.refresh_token}


@bp.post("/register")
def register():
    """
    Register a new user and return a token pair.
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
          required: [username, email, password]
          properties:
            username: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created (returns user and tokens)
      400:
        description: Missing fields or user already exists
    """
    data = user_create_schema.load(request.get_json(silent=True) or {})

    session = storage.get_session()
    existing = session.query(User).filter(
        or_(User.email == data["email"], User.username == data["username"])
    ).first()
    if existing:
        raise Conflict("User already exists")

    user = User(
        username=data["username"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
    )
    storage.new(user)
    storage.save()

    pair = get_token_service().issue_token_pair(user.id)
    logger.info("Registered user %s", user.id)
    return jsonify(
        {
            "message": "User registered successfully",
            "user": user_summary_schema.dump(user),
            **_token_body(pair),
        }
    ), 201


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
    # Malformed credentials are reported like wrong ones
    try:
        payload = user_login_schema.load(_json_object())
    except ValidationError:
        raise Unauthorized("Invalid credentials")
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password")
    if not email or not password:
        raise Unauthorized("Invalid credentials")

    session = storage.get_session()
    user = session.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password_hash):
        raise Unauthorized("Invalid credentials")

    pair = get_token_service().issue_token_pair(user.id)
    return jsonify(
        {
            "message": "Login successful",
            "user": user_summary_schema.dump(user),
            **_token_body(pair),
        }
    ), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new token pair (rotation; the old token is consumed)
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
        description: OK (returns a new token pair)
      401:
        description: Refresh token missing
      403:
        description: Refresh token invalid, expired or already used
    """
    payload = _json_object()
    try:
        pair = get_token_service().rotate_refresh_token(payload.get("refresh_token"))
    except MissingToken as e:
        raise Unauthorized(str(e))
    except InvalidToken as e:
        raise Forbidden(str(e))
    return jsonify(_token_body(pair)), 200


@bp.post("/logout")
def logout():
    """
    Logout: revokes the given refresh token
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
        description: Logged out
      400:
        description: Refresh token missing
    """
    payload = _json_object()
    token = payload.get("refresh_token")
    if not token or not isinstance(token, str):
        raise InvalidInput("Refresh token required")

    get_token_service().invalidate_refresh_token(token)
    return jsonify({"message": "Logout successful"}), 200
