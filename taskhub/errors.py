"""API error types and their JSON rendering.

Handlers raise these; ``register_error_handlers`` turns them into
``{"error": ..., "field_errors": {...}}`` responses. Anything else that
escapes a handler is logged and reported as a generic 500.
"""

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from taskhub.utils.db import db


class ApiError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message=None, field_errors=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.field_errors = field_errors or {}

    def to_dict(self):
        body = {"error": self.message}
        if self.field_errors:
            body["field_errors"] = self.field_errors
        return body


class AuthenticationRequired(ApiError):
    status_code = 401
    message = "Authentication required"


class AuthorizationDenied(ApiError):
    status_code = 403
    message = "You do not have permission to perform this action"


class NotFound(ApiError):
    status_code = 404
    message = "Not Found"


class ValidationFailed(ApiError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, field_errors, message=None):
        # Surface the first field message as the summary, like a form would
        if message is None and field_errors:
            message = next(iter(field_errors.values()))
        super().__init__(message, field_errors)


class Conflict(ApiError):
    status_code = 400
    message = "Conflict"


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(exc):
        if exc.status_code >= 500:
            db.session.rollback()
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(error="Not Found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify(error="Method Not Allowed"), 405

    @app.errorhandler(Exception)
    def server_error(exc):
        if isinstance(exc, HTTPException):
            return jsonify(error=exc.description or exc.name), exc.code
        db.session.rollback()
        current_app.logger.exception("Unhandled error: %s", exc)
        return jsonify(error="Internal Server Error"), 500
