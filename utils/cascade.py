"""
Cascade deletes for posts and users.

Every step is its own committed write; there is no surrounding transaction.
If a step fails the earlier ones stay applied and the remaining rows are left
orphaned (e.g. posts whose owner no longer exists). A comment created on a
post while that post is being deleted may also survive the cascade.
"""
from __future__ import annotations

import logging
from typing import Dict

from models import storage
from models.comment import Comment
from models.post import Post
from models.user import User

logger = logging.getLogger(__name__)


def delete_post_cascade(post_id: str) -> Dict[str, int]:
    """Delete a post's comments, then the post."""
    comments = storage.delete_where(Comment, Comment.post_id == post_id)
    posts = storage.delete_where(Post, Post.id == post_id)
    logger.info("Deleted post %s (%d comment(s))", post_id, comments)
    return {"posts": posts, "comments": comments}


def delete_user_cascade(user_id: str, token_service) -> Dict[str, int]:
    """
    Remove a user and everything they own, in this order:
    comments on their posts, comments they wrote elsewhere, their posts,
    their refresh tokens, the user record.
    """
    session = storage.get_session()
    post_ids = [row.id for row in session.query(Post.id).filter(Post.sender == user_id).all()]

    counts = {"comments": 0}
    if post_ids:
        counts["comments"] += storage.delete_where(Comment, Comment.post_id.in_(post_ids))
    counts["comments"] += storage.delete_where(Comment, Comment.sender == user_id)
    counts["posts"] = storage.delete_where(Post, Post.sender == user_id)
    counts["refresh_tokens"] = token_service.invalidate_all_for_user(user_id)
    counts["users"] = storage.delete_where(User, User.id == user_id)

    logger.info(
        "Deleted user %s: %d post(s), %d comment(s), %d refresh token(s)",
        user_id, counts["posts"], counts["comments"], counts["refresh_tokens"],
    )
    return counts
