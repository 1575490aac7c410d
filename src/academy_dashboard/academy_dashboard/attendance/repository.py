from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..auth.context import AuthContext


class AttendanceBackend(Protocol):
    """Remote academy API as seen by the attendance workflow.

    Implementations raise ``AuthError`` on 401, ``NetworkError`` when the backend
    is unreachable and ``BackendError`` for any other failed response.
    """

    def fetch_students(self, *, day: date, auth: AuthContext) -> Sequence[dict[str, Any]]:
        raise NotImplementedError

    def mark_attendance(self, *, payload: dict[str, Any], auth: AuthContext) -> dict[str, Any]:
        raise NotImplementedError

    def fetch_reports(
        self,
        *,
        branch_id: Optional[str],
        start_date: date,
        end_date: date,
        auth: AuthContext,
    ) -> Sequence[dict[str, Any]]:
        raise NotImplementedError

    def export_csv(self, *, auth: AuthContext) -> dict[str, Any]:
        """Server-side export: ``{"content": ..., "filename": ...}``."""

        raise NotImplementedError
