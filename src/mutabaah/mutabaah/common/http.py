"""Flask helpers shared by the controllers: session actor, guards and the
typed JSON envelope."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Mapping, Tuple

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import BadRequest, Forbidden, HTTPException, Unauthorized

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    LockedError,
    NotFoundError,
    PartialFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (LockedError, 423),
    (PartialFailure, 207),
)


def status_for(error: DomainError) -> int:
    for cls, code in _STATUS:
        if isinstance(error, cls):
            return code
    return 400


def json_ok(data: Any = None, status: int = 200):
    return jsonify({"ok": True, "data": data}), status


def json_error(error_type: str, message: str, status: int, **extra):
    body = {"type": error_type, "message": message}
    body.update(extra)
    return jsonify({"ok": False, "error": body}), status


def current_actor() -> Tuple[str, Role]:
    return str(session["user_id"]), Role(session.get("role", Role.EMPLOYEE.value))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise Unauthorized("Silakan login untuk melanjutkan")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise Unauthorized("Silakan login untuk melanjutkan")
        if session.get("role") != Role.ADMIN.value:
            raise Forbidden("Khusus admin")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> Mapping[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Body JSON harus berupa objek")
    return data


def flag(value: Any) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if isinstance(e, PartialFailure):
            logger.warning("partial failure on %s %s: %s", request.method, request.path, e)
            entity = getattr(e.entity, "to_dict", None)
            return json_error(type(e).__name__, str(e), status, entity=entity() if entity else None)
        return json_error(type(e).__name__, str(e), status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return json_error(e.name.replace(" ", ""), e.description or e.name, e.code or 500)
