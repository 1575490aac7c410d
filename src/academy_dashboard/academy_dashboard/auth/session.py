from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role
from .context import AuthContext

SESSION_KEYS = ("token", "user_id", "full_name", "role", "branch_id")


def current_auth() -> Optional[AuthContext]:
    """AuthContext for the signed-in dashboard user, or None."""
    if not session.get("token") or not session.get("user_id"):
        return None
    return AuthContext(
        token=session["token"],
        user_id=str(session["user_id"]),
        full_name=session.get("full_name") or "",
        role=Role(session.get("role") or Role.COACH.value),
        branch_id=session.get("branch_id"),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_auth() is None:
            return jsonify({"success": False, "message": "Authentication required. Please log in again."}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            auth = current_auth()
            if auth is None:
                return jsonify({"success": False, "message": "Authentication required. Please log in again."}), 401
            if auth.role.value not in allowed:
                return jsonify({"success": False, "message": "You do not have access to this page"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
