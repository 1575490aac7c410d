from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthError(DomainError):
    """Raised when the bearer token is missing, expired or rejected (HTTP 401)."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class BackendUnavailableError(DomainError):
    """Raised when the academy backend could not serve a request."""


class NetworkError(BackendUnavailableError):
    """Raised when the backend could not be reached at all."""


class BackendError(BackendUnavailableError):
    """Raised for non-2xx responses (other than 401) and unreadable bodies."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
