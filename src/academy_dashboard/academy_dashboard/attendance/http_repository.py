from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

import requests

from ..auth.context import AuthContext
from ..core.constants import DEFAULT_REQUEST_TIMEOUT
from ..core.exceptions import AuthError, BackendError, NetworkError
from .repository import AttendanceBackend

logger = logging.getLogger(__name__)


class HttpAttendanceBackend(AttendanceBackend):
    """Attendance endpoints of the academy REST API over ``requests``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, *, auth: AuthContext, **kwargs) -> Any:
        headers = auth.headers()
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning("Network error on %s %s: %s", method, path, e)
            raise NetworkError("Backend server is not available") from e

        if response.status_code == 401:
            raise AuthError("Authentication failed. Please log in again.")
        if not response.ok:
            body = response.text
            logger.warning("%s %s failed: %s %s", method, path, response.status_code, body[:200])
            raise BackendError(
                f"{method} {path} failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
                body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"{method} {path} returned invalid JSON", status_code=response.status_code) from e

    def _list_field(self, data: Any, key: str, path: str) -> list[Any]:
        if not isinstance(data, dict):
            raise BackendError(f"{path} returned {type(data).__name__}, expected an object")
        items = data.get(key) or []
        if not isinstance(items, list):
            raise BackendError(f"{path} returned a non-list '{key}' field")
        return items

    def fetch_students(self, *, day: date, auth: AuthContext) -> Sequence[dict[str, Any]]:
        path = "/api/attendance/students"
        data = self._request("GET", path, auth=auth, params={"date": day.isoformat()})
        return self._list_field(data, "students", path)

    def mark_attendance(self, *, payload: dict[str, Any], auth: AuthContext) -> dict[str, Any]:
        data = self._request("POST", "/api/attendance/mark", auth=auth, json=payload)
        return data if isinstance(data, dict) else {}

    def fetch_reports(
        self,
        *,
        branch_id: Optional[str],
        start_date: date,
        end_date: date,
        auth: AuthContext,
    ) -> Sequence[dict[str, Any]]:
        params = {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
        if branch_id:
            params["branch_id"] = branch_id
        path = "/api/attendance/reports"
        data = self._request("GET", path, auth=auth, params=params)
        return self._list_field(data, "reports", path)

    def export_csv(self, *, auth: AuthContext) -> dict[str, Any]:
        data = self._request("GET", "/api/attendance/export", auth=auth, params={"format": "csv"})
        if not isinstance(data, dict) or "content" not in data:
            raise BackendError("Export response has no content")
        return data
