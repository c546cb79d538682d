from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models import storage
from models.post import Post
from models.schemas.post import PostCreateSchema, PostUpdateSchema, PostOutSchema
from utils.cascade import delete_post_cascade
from utils.decorators import jwt_required
from utils.ownership import ensure_owner
from .resources import load_or_404

bp = Blueprint("posts", __name__)

# Schemas
post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_out_schema = PostOutSchema()
posts_out_schema = PostOutSchema(many=True)


@bp.post("/posts")
@jwt_required()
def create_post():
    """
    Create a new post owned by the caller
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, content]
          properties:
            title: { type: string }
            content: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      401:
        description: No access token
      403:
        description: Invalid or expired access token
    """
    data = post_create_schema.load(request.get_json(silent=True) or {})
    post = Post(title=data["title"], content=data["content"], sender=g.current_user_id)
    storage.new(post)
    storage.save()
    return jsonify(post_out_schema.dump(post)), 201


@bp.get("/posts")
@jwt_required()
def list_posts():
    """
    List posts, optionally filtered by owner
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - in: query
        name: sender
        type: string
        description: "Owner (user id) to filter by"
    responses:
      200:
        description: List of posts with their comments
    """
    session = storage.get_session()
    query = session.query(Post)
    sender = request.args.get("sender")
    if sender:
        query = query.filter(Post.sender == sender)
    rows = query.order_by(Post.created_at.asc()).all()
    return jsonify(posts_out_schema.dump(rows)), 200


@bp.get("/posts/<post_id>")
@jwt_required()
def get_post(post_id: str):
    """
    Get a single post by id
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200:
        description: Post found
      404:
        description: Not found
      500:
        description: Malformed id
    """
    post = load_or_404(Post, post_id, "Post")
    return jsonify(post_out_schema.dump(post)), 200


@bp.put("/posts/<post_id>")
@jwt_required()
def update_post(post_id: str):
    """
    Update a post (owner only). The owner itself cannot be changed.
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string }
            content: { type: string }
    responses:
      200:
        description: Updated
      403:
        description: Not the owner
      404:
        description: Not found
    """
    post = load_or_404(Post, post_id, "Post")
    ensure_owner(post.sender, "post")

    data = post_update_schema.load(request.get_json(silent=True) or {})
    for field in ["title", "content"]:
        if field in data:
            setattr(post, field, data[field])

    post.save()
    return jsonify(post_out_schema.dump(post)), 200


@bp.delete("/posts/<post_id>")
@jwt_required()
def delete_post(post_id: str):
    """
    Delete a post and all of its comments (owner only)
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200:
        description: Deleted
      403:
        description: Not the owner
      404:
        description: Not found
    """
    post = load_or_404(Post, post_id, "Post")
    ensure_owner(post.sender, "post")

    delete_post_cascade(post.id)
    return jsonify({"message": "Post deleted successfully"}), 200
