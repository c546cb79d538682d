"""
Ownership policy shared by every resource controller: only the principal
that created a post, comment or user record may change or delete it.
"""
from __future__ import annotations

from flask import g

from api.errors import Forbidden


def can_mutate(principal_id: str | None, owner_id: str | None) -> bool:
    """True when the authenticated principal owns the resource."""
    if not principal_id or not owner_id:
        return False
    return str(principal_id) == str(owner_id)


def ensure_owner(owner_id: str | None, resource: str = "resource") -> None:
    """Raise Forbidden unless the current request's principal owns the resource."""
    if not can_mutate(getattr(g, "current_user_id", None), owner_id):
        raise Forbidden(f"You are not allowed to modify this {resource}")
