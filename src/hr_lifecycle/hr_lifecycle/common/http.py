from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from flask import Flask, jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InsufficientBalanceError,
    ResourceError,
    StateConflictError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def status_code_for(exc: DomainError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, AuthenticationError):
        return 401
    if isinstance(exc, AuthorizationError):
        return 403
    if isinstance(exc, StateConflictError):
        return 409
    if isinstance(exc, InsufficientBalanceError):
        return 422
    if isinstance(exc, ResourceError):
        return 404
    return 400


def to_json_value(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = status_code_for(exc)
        logger.info("%s %s -> %s %s: %s", request.method, request.path, status, exc.kind, exc)
        body = {"success": False, "error": exc.kind, "message": str(exc)}
        if isinstance(exc, InsufficientBalanceError):
            body["requested"] = to_json_value(exc.requested)
            body["available"] = to_json_value(exc.available)
        return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def date_field(data: dict, name: str) -> date:
    raw = data.get(name)
    if not raw:
        raise ValidationError(f"{name} is required")
    try:
        return parse_iso_date(str(raw))
    except ValueError:
        raise ValidationError(f"{name} must be a YYYY-MM-DD date")


def int_arg(name: str, default: int, *, low: int = 1, high: int = 1000) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
    if value < low or value > high:
        raise ValidationError(f"{name} must be between {low} and {high}")
    return value
