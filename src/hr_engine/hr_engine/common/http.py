from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    DomainError,
    InsufficientBalanceError,
    NotFoundError,
    PartialFailureError,
    StaleRecordError,
    StoreError,
    ValidationError,
)

log = logging.getLogger(__name__)


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


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# Order matters: subclasses before their base.
_ERROR_MAP = (
    (ValidationError, 400, "VALIDATION_ERROR"),
    (NotFoundError, 404, "NOT_FOUND"),
    (InsufficientBalanceError, 409, "INSUFFICIENT_BALANCE"),
    (StaleRecordError, 409, "STALE_RECORD"),
    (PartialFailureError, 500, "PARTIAL_FAILURE"),
    (StoreError, 503, "STORE_ERROR"),
)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        for cls, status, code in _ERROR_MAP:
            if isinstance(e, cls):
                if status >= 500:
                    log.error("%s: %s", code, e)
                detail = None
                if isinstance(e, PartialFailureError):
                    detail = {"employee_id": e.employee_id, "balance_restored": e.balance_restored}
                return fail(str(e), status=status, code=code, detail=detail)
        return fail(str(e), status=400, code="DOMAIN_ERROR")

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)
