"""Problem+JSON (RFC 7807) error responses for every failure the API can hit.

Bodies always carry the storefront contract members ``code``, ``message``
and, when there is something to say, ``details``; the RFC members and the
``request_id`` ride along for operators.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from customer_auth.core.logger import ensure_request_id
from customer_auth.services._shared.errors import ServiceError

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Stable codes for statuses raised by werkzeug itself (routing, method, size)
STATUS_CODES: dict[int, str] = {
    HTTPStatus.BAD_REQUEST: "bad_request",
    HTTPStatus.UNAUTHORIZED: "unauthorized",
    HTTPStatus.FORBIDDEN: "forbidden",
    HTTPStatus.NOT_FOUND: "not_found",
    HTTPStatus.METHOD_NOT_ALLOWED: "method_not_allowed",
    HTTPStatus.CONFLICT: "conflict",
    HTTPStatus.REQUEST_ENTITY_TOO_LARGE: "payload_too_large",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "unsupported_media_type",
    HTTPStatus.UNPROCESSABLE_ENTITY: "unprocessable_entity",
    HTTPStatus.TOO_MANY_REQUESTS: "too_many_requests",
    HTTPStatus.INTERNAL_SERVER_ERROR: "internal_server_error",
    HTTPStatus.SERVICE_UNAVAILABLE: "service_unavailable",
}


def code_for_status(status: int) -> str:
    return STATUS_CODES.get(status, "error")


def problem_body(
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Assemble the problem document for one failed request.

    :param status: HTTP status of the response.
    :param code: Machine-readable error code clients switch on.
    :param message: Client-safe explanation; also used as RFC ``detail``.
    :param details: Extra structured context, omitted when empty.
    :rtype: dict
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if has_request_context() else None,
        "code": code,
        "message": message,
    }
    if details:
        body["details"] = details
    body["request_id"] = ensure_request_id()
    return body


def problem_response(body: dict[str, Any]) -> tuple[Response, int]:
    """Wrap a problem document in a response with the problem media type."""
    resp = jsonify(body)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, int(body["status"])


class APIError(Exception):
    """
    Failure raised by the HTTP layer itself, with an explicit status.

    Parameters
    ----------
    message : str
        Client-facing explanation.
    status_code : int, optional
        Response status, ``400`` unless given.
    code : str, optional
        Stable error code, ``"bad_request"`` unless given.
    details : dict[str, Any] | None, optional
        Structured context echoed under ``details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.BAD_REQUEST,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    @classmethod
    def from_service_error(cls, err: ServiceError, *, status_code: int) -> APIError:
        """Re-raise a :class:`ServiceError` under another status, same code and message."""
        return cls(err.message, status_code=status_code, code=err.code, details=err.details or None)

    def to_problem(self) -> dict[str, Any]:
        return problem_body(self.status_code, self.code, self.message, self.details or None)


class Unauthorized(APIError):
    """Authentication rejected (missing header, bad or expired token)."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


def _log_problem(body: dict[str, Any], label: str, *, exc_info: Any = None) -> None:
    status = body["status"]
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        level = logging.ERROR
    elif status == HTTPStatus.UNPROCESSABLE_ENTITY:
        level = logging.INFO
    else:
        level = logging.WARNING
    log.log(
        level,
        "%s: code=%s status=%s msg=%s",
        label,
        body["code"],
        status,
        body["message"],
        extra={"request_id": body["request_id"], "status": status},
        exc_info=exc_info,
    )


def init_app(app: Flask) -> None:
    """
    Register the error handlers.

    Notes
    -----
    - :class:`ServiceError` (expected business failures) become ``422``.
    - Database and unknown failures become opaque 5xx bodies; the cause is
      only logged, with its traceback.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        body = err.to_problem()
        _log_problem(body, "APIError")
        return problem_response(body)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        body = problem_body(HTTPStatus.UNPROCESSABLE_ENTITY, err.code, err.message, err.details or None)
        _log_problem(body, "ServiceError")
        return problem_response(body)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        body = problem_body(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "invalid request body",
            {"errors": err.messages},
        )
        _log_problem(body, "ValidationError")
        return problem_response(body)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = code_for_status(status)
        if status == HTTPStatus.NOT_FOUND and has_request_context():
            message = f"Route '{request.path}' not found"
        else:
            # werkzeug descriptions may be empty or HTML-ish
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        body = problem_body(status, code, message)
        _log_problem(body, "HTTPException")
        return problem_response(body)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        body = problem_body(HTTPStatus.CONFLICT, "conflict", "Resource conflict")
        _log_problem(body, "IntegrityError", exc_info=err)
        return problem_response(body)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        body = problem_body(
            HTTPStatus.SERVICE_UNAVAILABLE, "service_unavailable", "Service temporarily unavailable"
        )
        _log_problem(body, "OperationalError", exc_info=err)
        return problem_response(body)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        body = problem_body(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error")
        _log_problem(body, "Unhandled exception", exc_info=err)
        return problem_response(body)
