from __future__ import annotations

from flask import Blueprint, request, jsonify, g
from sqlalchemy import or_

from models import storage
from models.user import User
from models.schemas.user import UserCreateSchema, UserUpdateSchema, UserOutSchema
from utils.cascade import delete_user_cascade
from utils.decorators import jwt_required, get_token_service
from utils.ownership import ensure_owner
from utils.security import hash_password
from .errors import Conflict, NotFound
from .resources import load_or_404

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


def _ensure_unique(username: str | None, email: str | None, exclude_id: str | None = None) -> None:
    criteria = []
    if username:
        criteria.append(User.username == username)
    if email:
        criteria.append(User.email == email)
    if not criteria:
        return
    query = storage.get_session().query(User).filter(or_(*criteria))
    if exclude_id:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise Conflict("User with this email or username already exists")


@bp.get("/users")
@jwt_required()
def list_users():
    """
    List all users (newest first)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    rows = storage.get_session().query(User).order_by(User.created_at.desc()).all()
    return jsonify(user_list_out_schema.dump(rows)), 200


@bp.get("/users/me")
@jwt_required()
def me():
    """
    Get the caller's own record
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      404:
        description: The token's user no longer exists
    """
    user = storage.get(User, g.current_user_id)
    if not user:
        raise NotFound("User not found")
    return jsonify(user_out_schema.dump(user)), 200


@bp.get("/users/<user_id>")
@jwt_required()
def get_user(user_id: str):
    """
    Get a user by id
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
      500: { description: Malformed id }
    """
    user = load_or_404(User, user_id, "User")
    return jsonify(user_out_schema.dump(user)), 200


@bp.post("/users")
@jwt_required()
def create_user():
    """
    Create a user (no tokens are issued; use /auth/register for sign-up)
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
          required: [username, email, password]
          properties:
            username: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error or duplicate }
    """
    data = user_create_schema.load(request.get_json(silent=True) or {})
    _ensure_unique(data["username"], data["email"])

    user = User(
        username=data["username"],
        email=data["email"],
        password_hash=hash_password(data["password"]),
    )
    storage.new(user)
    storage.save()
    return jsonify({"message": "User created successfully", "user": user_out_schema.dump(user)}), 201


@bp.put("/users/<user_id>")
@jwt_required()
def update_user(user_id: str):
    """
    Update the caller's own profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            username: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      200: { description: Updated }
      400: { description: Validation error or duplicate }
      403: { description: Not your account }
      404: { description: Not found }
    """
    user = load_or_404(User, user_id, "User")
    ensure_owner(user.id, "user")

    data = user_update_schema.load(request.get_json(silent=True) or {})
    _ensure_unique(data.get("username"), data.get("email"), exclude_id=user.id)

    if "username" in data:
        user.username = data["username"]
    if "email" in data:
        user.email = data["email"]
    if "password" in data:
        user.password_hash = hash_password(data["password"])

    user.save()
    return jsonify({"message": "User updated successfully", "user": user_out_schema.dump(user)}), 200


@bp.delete("/users/<user_id>")
@jwt_required()
def delete_user(user_id: str):
    """
    Delete the caller's own account together with their posts, comments and tokens
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      403: { description: Not your account }
      404: { description: Not found }
    """
    user = load_or_404(User, user_id, "User")
    ensure_owner(user.id, "user")

    delete_user_cascade(user.id, get_token_service())
    return jsonify({"message": "User deleted successfully"}), 200
