"""Flask helpers shared by the feature controllers.

Identity comes from the signed Flask session (``user_id`` and ``role``),
which is populated by the institution's login service.
"""

from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_optional_date


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "No Token"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "No Token"}), 401
            if current_role() not in roles:
                return jsonify({"error": "Access Denied"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def require_arg(name: str, label: Optional[str] = None) -> str:
    value = (request.args.get(name) or "").strip()
    if not value:
        raise ValidationError(f"{label or name} is required")
    return value


def date_arg(name: str, label: Optional[str] = None) -> date:
    return parse_iso_date(require_arg(name, label))


def optional_date_arg(name: str) -> Optional[date]:
    return parse_optional_date(request.args.get(name))
