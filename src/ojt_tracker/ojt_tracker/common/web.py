"""Helpers shared by the Flask controllers (session guards, JSON errors)."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import REVIEWER_ROLES, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
)


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def api_view(failure_message: str):
    """Map domain errors to JSON responses; anything else is logged and becomes a 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                for error_type, status in _STATUS_BY_ERROR:
                    if isinstance(e, error_type):
                        return error_response(str(e), status)
                return error_response(str(e), 400)
            except Exception:
                logger.exception("%s %s failed", request.method, request.path)
                return error_response(failure_message, 500)

        return wrapper

    return decorator


def current_role() -> Optional[Role]:
    role = session.get("role")
    return Role(role) if role else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return error_response("Please log in to continue", 401)
            if current_role() not in allowed:
                return error_response("Forbidden", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


reviewer_required = roles_required(*REVIEWER_ROLES)
student_required = roles_required(Role.STUDENT)


def ensure_can_view_student(student_id: int) -> None:
    """Students see only their own data; reviewers see everyone's."""
    if current_role() in REVIEWER_ROLES:
        return
    if session.get("student_id") is not None and int(session["student_id"]) == int(student_id):
        return
    raise AuthorizationError("You can only view your own attendance")


def date_arg(name: str) -> Optional[date]:
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def int_arg(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def bool_arg(name: str) -> Optional[bool]:
    value = request.args.get(name)
    if value is None:
        return None
    return value.lower() == "true"
