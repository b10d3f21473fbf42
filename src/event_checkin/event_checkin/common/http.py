from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict[str, Any]:
    """Request JSON object, or ValidationError when the body is not a JSON object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return error_response(str(e), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return error_response(str(e), 404)

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return error_response(str(e), 409)

    @app.errorhandler(PersistenceError)
    def _persistence_error(e: PersistenceError):
        logger.exception("Storage failure on %s %s: %s", request.method, request.path, e)
        return error_response("Storage error, please try again later", 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("Internal server error", 500)
