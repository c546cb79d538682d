"""
Error taxonomy and the handlers that turn it into the JSON error envelope:

    {"error": <kind>, "message": <text>, "status": <code>, "details": {...}}

Controllers raise ApiError subclasses; anything else that escapes a view is
mapped here as well so no partial response is ever sent.
"""
from __future__ import annotations

from enum import Enum
import logging

from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def status(self) -> int:
        return _STATUS[self]


# Duplicates are reported as 400, not 409.
_STATUS = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 400,
    ErrorKind.INTERNAL_ERROR: 500,
}


class ApiError(Exception):
    kind = ErrorKind.INTERNAL_ERROR
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.kind.status


class InvalidInput(ApiError):
    kind = ErrorKind.VALIDATION_ERROR
    default_message = "Invalid input"


class Unauthorized(ApiError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Authentication required"


class Forbidden(ApiError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFound(ApiError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class Conflict(ApiError):
    kind = ErrorKind.CONFLICT
    default_message = "Resource already exists"


class InternalError(ApiError):
    kind = ErrorKind.INTERNAL_ERROR


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status >= 500:
            logger.error("%s: %s", err.kind.value, err.message)
        return error_response(err.kind.value, err.message, err.status, details=err.details)

    # Marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("VALIDATION_ERROR", "Invalid input", 400, details=err.messages)

    # Unique constraint races that slipped past the explicit duplicate checks
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        logger.warning("Integrity error: %s", message)
        lower_msg = message.lower()
        if "unique" in lower_msg:
            return error_response(ErrorKind.CONFLICT.value, "Resource already exists", 400)
        return error_response(ErrorKind.VALIDATION_ERROR.value, "Integrity error", 400)

    # Werkzeug HTTPExceptions (unknown route, wrong method, ...) keep their status
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.code or 400
        if code == 404:
            return error_response(ErrorKind.NOT_FOUND.value, "Resource not found", 404)
        kind = ErrorKind.INTERNAL_ERROR if code >= 500 else ErrorKind.VALIDATION_ERROR
        return error_response(kind.value, err.description, code)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        # In dev, include exception details to speed up debugging
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response(ErrorKind.INTERNAL_ERROR.value, "An unexpected error occurred", 500, details=details)
