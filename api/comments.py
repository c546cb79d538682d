from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from models import storage
from models.comment import Comment
from models.post import Post
from models.schemas.comment import CommentCreateSchema, CommentUpdateSchema, CommentOutSchema
from utils.decorators import jwt_required
from utils.ownership import ensure_owner
from .resources import load_or_404

bp = Blueprint("comments", __name__)

comment_create_schema = CommentCreateSchema()
comment_update_schema = CommentUpdateSchema()
comment_out_schema = CommentOutSchema()
comments_out_schema = CommentOutSchema(many=True)


@bp.post("/comments")
@jwt_required()
def create_comment():
    """
    Comment on a post
    ---
    tags: [Comments]
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
          required: [post_id, content]
          properties:
            post_id: { type: string }
            content: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      404: { description: Post not found }
    """
    data = comment_create_schema.load(request.get_json(silent=True) or {})
    post = load_or_404(Post, data["post_id"], "Post")

    comment = Comment(post_id=post.id, content=data["content"], sender=g.current_user_id)
    storage.new(comment)
    storage.save()
    return jsonify(comment_out_schema.dump(comment)), 201


@bp.get("/comments")
@jwt_required()
def list_comments():
    """
    List comments, optionally for one post
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - in: query
        name: post_id
        type: string
    responses:
      200: { description: OK }
    """
    session = storage.get_session()
    query = session.query(Comment)
    post_id = request.args.get("post_id")
    if post_id:
        query = query.filter(Comment.post_id == post_id)
    rows = query.order_by(Comment.created_at.asc()).all()
    return jsonify(comments_out_schema.dump(rows)), 200


@bp.get("/comments/<comment_id>")
@jwt_required()
def get_comment(comment_id: str):
    """
    Get a comment by id
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    comment = load_or_404(Comment, comment_id, "Comment")
    return jsonify(comment_out_schema.dump(comment)), 200


@bp.put("/comments/<comment_id>")
@jwt_required()
def update_comment(comment_id: str):
    """
    Edit a comment's content (owner only)
    ---
    tags: [Comments]
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            content: { type: string }
    responses:
      200: { description: Updated }
      400: { description: Content is required }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    comment = load_or_404(Comment, comment_id, "Comment")
    ensure_owner(comment.sender, "comment")

    data = comment_update_schema.load(request.get_json(silent=True) or {})
    comment.content = data["content"]
    comment.save()
    return jsonify(comment_out_schema.dump(comment)), 200


@bp.delete("/comments/<comment_id>")
@jwt_required()
def delete_comment(comment_id: str):
    """
    Delete a comment (owner only)
    ---
    tags: [Comments]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    comment = load_or_404(Comment, comment_id, "Comment")
    ensure_owner(comment.sender, "comment")

    storage.delete(comment)
    storage.save()
    return jsonify({"message": "Comment deleted successfully"}), 200
