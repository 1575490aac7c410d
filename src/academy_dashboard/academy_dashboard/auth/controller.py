from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.responses import error_response
from ..common.validators import require_non_empty
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .session import SESSION_KEYS, current_auth


def register(app: Flask, container: Container) -> None:
    @app.route("/session", methods=["POST"], endpoint="session_start")
    def session_start():
        """Remember the token and identity issued by the academy backend.

        The token itself is checked by the backend on every call, not here.
        """

        data = request.get_json(silent=True) or {}
        try:
            token = require_non_empty(data.get("token"), "token")
            user_id = require_non_empty(data.get("user_id"), "user_id")
            try:
                role = Role(data.get("role") or Role.COACH.value)
            except ValueError:
                raise ValidationError("Unknown role") from None
        except ValidationError as e:
            return error_response(e)

        previous = session.get("user_id")
        if previous and previous != user_id:
            container.attendance_service.drop(previous)

        session["token"] = token
        session["user_id"] = user_id
        session["full_name"] = data.get("full_name") or ""
        session["role"] = role.value
        session["branch_id"] = data.get("branch_id") or None

        return jsonify({"success": True, "user_id": user_id, "role": role.value})

    @app.route("/session", methods=["DELETE"], endpoint="session_end")
    def session_end():
        auth = current_auth()
        if auth is not None:
            container.attendance_service.drop(auth.user_id)
        for key in SESSION_KEYS:
            session.pop(key, None)
        return jsonify({"success": True})
