"""Lookup helper shared by the resource blueprints."""
from __future__ import annotations

from models import storage
from models.base_model import is_valid_id
from .errors import InternalError, NotFound


def load_or_404(cls, resource_id: str, name: str):
    """
    Fetch `cls` by id.

    A malformed id is reported as a server error (500), matching the API's
    historical behaviour; a well-formed id with no row is a 404.
    """
    if not is_valid_id(resource_id):
        raise InternalError("Invalid id format", details={"id": resource_id})
    obj = storage.get(cls, resource_id)
    if obj is None:
        raise NotFound(f"{name} not found")
    return obj
