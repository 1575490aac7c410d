from __future__ import annotations

from flask import jsonify

from ..core.exceptions import (
    AuthError,
    AuthorizationError,
    BackendUnavailableError,
    DomainError,
    ValidationError,
)


def error_response(error: DomainError):
    """Map a domain error onto a JSON error response."""

    if isinstance(error, AuthError):
        status = 401
    elif isinstance(error, AuthorizationError):
        status = 403
    elif isinstance(error, ValidationError):
        status = 400
    elif isinstance(error, BackendUnavailableError):
        status = 502
    else:
        status = 500
    return jsonify({"success": False, "message": str(error)}), status
