"""Centralised error handling and custom exceptions.

This module defines custom exception classes and provides
Flask error handlers that serialise them into JSON responses.
By using custom exceptions, the service layer can signal
specific error conditions without coupling itself to HTTP
response codes. The Flask app will register these handlers
during application factory initialisation.

The scoring engine never raises; these errors only come from
request validation and data access.
"""
from __future__ import annotations

import logging

from flask import jsonify, request

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, fields: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    def to_response(self, status_code: int = 400):
        response = {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": self.message,
                "fields": self.fields,
            }
        }
        return jsonify(response), status_code


class UnauthorizedError(Exception):
    """Raised when the request identity cannot be resolved to a user."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 401):
        response = {
            "error": {
                "code": "UNAUTHORIZED",
                "message": self.message,
            }
        }
        return jsonify(response), status_code


class NotFoundError(Exception):
    """Raised when a requested resource cannot be found."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 404):
        response = {
            "error": {
                "code": "NOT_FOUND",
                "message": self.message,
            }
        }
        return jsonify(response), status_code


def register_error_handlers(app) -> None:
    """Register custom error handlers on the given Flask app."""
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        logger.warning("Validation failed on %s %s: %s", request.method, request.path, err.message)
        return err.to_response(400)

    @app.errorhandler(UnauthorizedError)
    def handle_unauthorized_error(err: UnauthorizedError):
        logger.warning("Unauthorized request to %s: %s", request.path, err.message)
        return err.to_response(401)

    @app.errorhandler(NotFoundError)
    def handle_not_found_error(err: NotFoundError):
        return err.to_response(404)
