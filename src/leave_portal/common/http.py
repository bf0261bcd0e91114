"""JSON helpers shared by the controllers."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..core.constants import GENERIC_STORE_ERROR
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}


def ok(message: str = "", code: int = 200, **payload: Any):
    return jsonify({"success": True, "message": message, **payload}), code


def fail(message: str, code: int):
    return jsonify({"success": False, "message": message}), code


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def hod_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please log in to continue", 401)
        if session.get("role") != Role.HOD.value:
            return fail("Only an HOD can access this page", 403)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def text_field(data: dict, field: str) -> str:
    value = data.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be text")
    return value


def parse_date_field(data: dict, field: str, *, required: bool = True) -> Optional[date]:
    raw = str(data.get(field) or "").strip()
    if not raw:
        if required:
            raise ValidationError(f"{field} is required")
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in STATUS_CODES.items() if isinstance(e, cls)), 400)
        return fail(str(e), status)

    @app.errorhandler(StoreError)
    def handle_store_error(e: StoreError):
        logger.error("Store error on %s %s: %s", request.method, request.path, e)
        return fail(GENERIC_STORE_ERROR, 503)
