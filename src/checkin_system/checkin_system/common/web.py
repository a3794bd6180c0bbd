from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CollaboratorError,
    ConflictError,
    DomainError,
    NotFoundError,
    PhotoDeletionError,
    PhotoStoreUnavailableError,
    ValidationError,
)
from ..users.service import SessionUser

logger = logging.getLogger(__name__)

# Most specific first: AlreadyCheckedInError is a ConflictError.
ERROR_STATUS = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (PhotoStoreUnavailableError, 503),
    (PhotoDeletionError, 502),
    (CollaboratorError, 502),
)


def current_user() -> Optional[SessionUser]:
    if "user_id" not in session:
        return None
    try:
        role = Role(session.get("role"))
    except ValueError:
        return None
    return SessionUser(
        user_id=int(session["user_id"]),
        name=str(session.get("name") or ""),
        email=str(session.get("email") or ""),
        role=role,
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return jsonify({"error": "Unauthorized"}), 401
        if user.role != Role.ADMIN:
            return jsonify({"error": "Forbidden"}), 403
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def status_for(error: DomainError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.warning("%s on %s %s: %s", type(error).__name__, request.method, request.path, error)
        return jsonify({"error": str(error)}), status

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Server error"}), 500
