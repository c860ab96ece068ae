from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InsufficientBalanceError,
    InvalidStateError,
    NotFoundError,
)


@dataclass(frozen=True)
class CurrentUser:
    """Caller identity supplied by the auth layer (stored in the Flask session)."""

    user_id: int
    role: Role


def current_user() -> CurrentUser:
    return CurrentUser(user_id=int(session["user_id"]), role=Role(session["role"]))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role" not in session:
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def to_json(value: Any) -> Any:
    """Dataclasses/enums/dates to JSON-friendly values (Decimal is left to Flask)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted(to_json(v) for v in value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (AuthorizationError, 403),
    (InvalidStateError, 409),
)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(err, cls)), 400)
        body: dict[str, Any] = {"error": str(err), "type": type(err).__name__}
        if isinstance(err, InsufficientBalanceError):
            body["requested"] = err.requested
            body["available"] = err.available
        return jsonify(body), status
