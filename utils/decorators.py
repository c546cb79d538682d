from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from api.errors import Unauthorized, Forbidden
from utils.tokens import MissingToken, InvalidToken


def get_token_service():
    """The TokenService the application factory attached to the current app."""
    return current_app.extensions["token_service"]


def jwt_required():
    """
    Gate a view behind a valid access token.

    - no header / not a Bearer header -> 401
    - token present but bad signature or expired -> 403
    On success the user id is stored on g.current_user_id. The gate does not
    touch the database and knows nothing about resource ownership.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            tokens = get_token_service()
            try:
                token = tokens.extract_bearer(request.headers.get("Authorization"))
            except MissingToken as e:
                raise Unauthorized(str(e))
            try:
                g.current_user_id = tokens.verify_access_token(token)
            except InvalidToken as e:
                raise Forbidden(str(e))
            except MissingToken as e:
                raise Unauthorized(str(e))
            return fn(*args, **kwargs)

        return wrapper

    return decorator
