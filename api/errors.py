from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from models import storage
from utils.exceptions import AppError

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    422: "VALIDATION_ERROR",
}


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # Domain errors carry their own status, code and (client-safe) message
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error("%s: %s", err.__class__.__name__, err.reason or err.message)
        return error_response(err.error, err.message, err.status_code)

    # Marshmallow validation errors map to 400
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("INVALID_INPUT", "Invalid input", 400, details=err.messages)

    # Unique constraints and the like; driver text stays in the log
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        storage.rollback()
        logger.warning("Integrity error: %s", getattr(err, "orig", err))
        return error_response("CONFLICT", "Request conflicts with existing data", 409)

    # Connectivity and other database failures
    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        storage.rollback()
        logger.exception("Database error", exc_info=err)
        return error_response("UNAVAILABLE", "Service temporarily unavailable", 503)

    # Werkzeug HTTPExceptions (abort(), routing) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.code or 400
        return error_response(HTTP_ERROR_CODES.get(code, "BAD_REQUEST"), err.description, code)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
