from http import HTTPStatus

from flask import jsonify, current_app

def success_response(data=None, status_code=HTTPStatus.OK):
    return jsonify({"data": data, "error": None}), status_code

def error_response(message, status_code=HTTPStatus.BAD_REQUEST, details=None):
    error = {"message": message}
    if details is not None:
        error["details"] = details
    return jsonify({"data": None, "error": error}), status_code

def ok(payload, status_code=HTTPStatus.OK):
    """Public envelope: ``payload`` already carries ``data`` and ``meta``."""
    return jsonify(payload), status_code

def not_found(message="Not found"):
    return error_response(message, HTTPStatus.NOT_FOUND)

def bad_request(message, details=None):
    return error_response(message, HTTPStatus.BAD_REQUEST, details)

def server_error(message, exc=None):
    """500 envelope; the exception text is only exposed in debug mode."""
    details = str(exc) if exc is not None and current_app.debug else None
    return error_response(message, HTTPStatus.INTERNAL_SERVER_ERROR, details)

def upload_failed_response(exc):
    return error_response(f"{exc.label} upload failed", exc.error.status_code, exc.error.message)
