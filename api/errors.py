import logging

from flask import jsonify, current_app, request
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from api.envelope import request_context
from models import storage
from utils.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred"

# Every ErrorKind must appear here; checked at import time below.
KIND_STATUS = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.VALIDATION: 422,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.INVALID_CREDENTIAL: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.STORAGE: 500,
    ErrorKind.INTERNAL: 500,
}

_unmapped = set(ErrorKind) - set(KIND_STATUS)
if _unmapped:
    raise RuntimeError(f"ErrorKind without HTTP status: {sorted(k.value for k in _unmapped)}")

# kinds whose message/details never leave the server
_OPAQUE_KINDS = {ErrorKind.STORAGE, ErrorKind.INTERNAL}

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    415: "UNSUPPORTED_MEDIA_TYPE",
    422: "VALIDATION_ERROR",
    429: "TOO_MANY_REQUESTS",
}


def error_response(code: str, message: str, status: int, details=None):
    payload = {
        "success": False,
        "error": {
            "message": message,
            "code": code,
            "type": f"HTTP_{status}",
            "details": details,
        },
        "context": request_context(status),
    }
    response = jsonify(payload)
    if status == 401:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response, status


def _log(status: int, message: str, err: Exception):
    line = f"{request.method} {request.path} -> {message}"
    if status >= 500:
        logger.error(line, exc_info=err)
    elif current_app and current_app.debug:
        logger.info(line)


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        status = KIND_STATUS[err.kind]
        if err.kind in _OPAQUE_KINDS:
            logger.error(
                "%s %s -> %s (%s)", request.method, request.path, err.message, err.reason or err.code, exc_info=err
            )
            return error_response(ErrorKind.INTERNAL.value, GENERIC_MESSAGE, status)
        if err.reason:
            logger.info("%s %s -> %s (%s)", request.method, request.path, err.message, err.reason)
        return error_response(err.code, err.message, status, details=err.details)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        _log(422, "Invalid input", err)
        return error_response(ErrorKind.VALIDATION.value, "Invalid input", 422, details=err.messages)

    # Integrity errors that slipped past service-level checks; raw DB text stays in the log
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        storage.rollback()
        lower_msg = str(getattr(err, "orig", err)).lower()
        logger.warning("%s %s -> integrity error: %s", request.method, request.path, lower_msg)
        if "unique" in lower_msg:
            return error_response(ErrorKind.CONFLICT.value, "Unique constraint violated.", 409)
        return error_response(ErrorKind.BAD_REQUEST.value, "Integrity error.", 400)

    # Werkzeug HTTPExceptions (abort(), routing 404/405, bad JSON) keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        if status == 404:
            message = "Resource not found"
        elif status == 429:
            # the default description is the limit string itself
            message = "Too Many Requests"
        else:
            message = err.description
        _log(status, message, err)
        return error_response(_HTTP_CODES.get(status, f"HTTP_{status}"), message, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        _log(500, GENERIC_MESSAGE, err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response(ErrorKind.INTERNAL.value, GENERIC_MESSAGE, 500, details=details)
