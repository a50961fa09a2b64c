from flask import jsonify
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error the API reports to the caller as-is."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, errors: list | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class RequestValidationError(ApiError):
    status_code = 400
    default_message = "Validation error"


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Unauthorized request"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Conflict"


class InternalError(ApiError):
    status_code = 500
    default_message = "Internal Server Error"


def error_response(status: int, message: str, errors: list | None = None):
    payload = {
        "statusCode": status,
        "success": False,
        "message": message,
        "errors": errors or [],
    }
    return jsonify(payload), status


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            logger.error("API error %s: %s", err.status_code, err.message)
        return error_response(err.status_code, err.message, err.errors)

    # Werkzeug HTTPExceptions (unknown route, wrong method, body too large) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.code or 400, err.description or err.name)

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        logger.exception("Database error", exc_info=err)
        return error_response(500, "Internal Server Error")

    # 500 Internal Error (catch-all); never leak internals to the caller
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response(500, "Internal Server Error")
