from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthError


@dataclass(frozen=True)
class AuthContext:
    """Who is acting, and with which bearer token.

    Passed explicitly to every service that talks to the backend; nothing reads
    the token from module-level state.
    """

    token: str
    user_id: str
    full_name: str = ""
    role: Role = Role.COACH
    branch_id: Optional[str] = None

    def require_token(self) -> str:
        if not self.token or not self.token.strip():
            raise AuthError("Authentication required. Please log in again.")
        return self.token

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.require_token()}",
            "Content-Type": "application/json",
        }

    @property
    def display_name(self) -> str:
        return self.full_name or self.user_id


def default_status_for(role: Role) -> AttendanceStatus:
    """Coaches see unmarked students as absent; managers and admins as not marked."""
    if role == Role.COACH:
        return AttendanceStatus.ABSENT
    return AttendanceStatus.NOT_MARKED
