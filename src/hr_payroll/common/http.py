from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidAmountError,
    InvalidRangeError,
    InvalidTransitionError,
    MissingCompensationError,
    NotFoundError,
    OverlapError,
    ValidationError,
)
from ..core.logging import get_logger

log = get_logger(__name__)

# Checked in order, so subclasses come before ValidationError.
_STATUS_BY_ERROR = (
    (InvalidRangeError, 400, "INVALID_RANGE"),
    (InvalidAmountError, 400, "INVALID_AMOUNT"),
    (ValidationError, 400, "VALIDATION_ERROR"),
    (AuthorizationError, 403, "FORBIDDEN"),
    (NotFoundError, 404, "NOT_FOUND"),
    (OverlapError, 409, "LEAVE_OVERLAP"),
    (InvalidTransitionError, 409, "INVALID_TRANSITION"),
    (MissingCompensationError, 422, "MISSING_COMPENSATION"),
)


def ok(data=None, status=200, **meta):
    payload = {"success": True, "data": data}
    if meta:
        payload["meta"] = meta
    return jsonify(payload), status


def fail(message="Bad Request", status=400, code=None, detail=None):
    err = {"message": message}
    if code:
        err["code"] = code
    if detail:
        err["detail"] = detail
    return jsonify({"success": False, "error": err}), status


def status_for(error: DomainError) -> tuple[int, str]:
    for error_type, status, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status, code
    return 400, "DOMAIN_ERROR"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        status, code = status_for(e)
        log.info("domain_error", error=type(e).__name__, status=status, message=str(e))
        return fail(str(e), status=status, code=code)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _500(e: Exception):
        log.exception("unhandled_error")
        return fail("Internal server error", status=500)
