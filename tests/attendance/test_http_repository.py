from __future__ import annotations

from datetime import date
from typing import Any

import pytest
import requests

from src.academy_dashboard.academy_dashboard.attendance.http_repository import HttpAttendanceBackend
from src.academy_dashboard.academy_dashboard.core.exceptions import AuthError, BackendError, NetworkError

_MISSING = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = _MISSING, text: str = "", reason: str = "OK"):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self.reason = reason
        self.text = text
        self._payload = payload

    def json(self):
        if self._payload is _MISSING:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error: Exception = None):
        self.response = response or FakeResponse(payload={})
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response


def _backend(session, timeout=7):
    return HttpAttendanceBackend("http://backend.test/", timeout=timeout, session=session)


def test_fetch_students_sends_bearer_token_and_date(coach_auth):
    session = FakeSession(FakeResponse(payload={"students": [{"id": "s1"}]}))

    students = _backend(session).fetch_students(day=date(2026, 2, 1), auth=coach_auth)

    assert students == [{"id": "s1"}]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://backend.test/api/attendance/students"
    assert call["params"] == {"date": "2026-02-01"}
    assert call["headers"]["Authorization"] == "Bearer tok-123"
    assert call["timeout"] == 7


def test_missing_students_key_is_an_empty_roster(coach_auth):
    session = FakeSession(FakeResponse(payload={"success": True}))

    assert _backend(session).fetch_students(day=date(2026, 2, 1), auth=coach_auth) == []


def test_mark_attendance_posts_json(coach_auth):
    session = FakeSession(FakeResponse(payload={"success": True}))
    payload = {"user_id": "s1", "status": "present"}

    assert _backend(session).mark_attendance(payload=payload, auth=coach_auth) == {"success": True}
    assert session.calls[0]["method"] == "POST"
    assert session.calls[0]["json"] == payload


def test_unauthorized_response_is_auth_error(coach_auth):
    session = FakeSession(FakeResponse(401, text="expired", reason="Unauthorized"))

    with pytest.raises(AuthError):
        _backend(session).mark_attendance(payload={}, auth=coach_auth)


def test_server_error_carries_status_code(coach_auth):
    session = FakeSession(FakeResponse(500, text="boom", reason="Internal Server Error"))

    with pytest.raises(BackendError) as excinfo:
        _backend(session).fetch_students(day=date(2026, 2, 1), auth=coach_auth)

    assert excinfo.value.status_code == 500
    assert excinfo.value.body == "boom"


def test_connection_failure_is_network_error(coach_auth):
    session = FakeSession(error=requests.exceptions.ConnectionError("refused"))

    with pytest.raises(NetworkError):
        _backend(session).fetch_students(day=date(2026, 2, 1), auth=coach_auth)


def test_invalid_json_is_backend_error(coach_auth):
    session = FakeSession(FakeResponse(200, text="<html>"))

    with pytest.raises(BackendError):
        _backend(session).mark_attendance(payload={}, auth=coach_auth)


def test_missing_token_never_reaches_network(coach_auth):
    from dataclasses import replace

    session = FakeSession()

    with pytest.raises(AuthError):
        _backend(session).fetch_students(day=date(2026, 2, 1), auth=replace(coach_auth, token=""))
    assert session.calls == []


def test_reports_send_branch_only_when_given(coach_auth):
    session = FakeSession(FakeResponse(payload={"reports": [{"student_id": "s1"}]}))
    backend = _backend(session)

    rows = backend.fetch_reports(branch_id=None, start_date=date(2026, 1, 25), end_date=date(2026, 2, 1), auth=coach_auth)
    backend.fetch_reports(branch_id="b2", start_date=date(2026, 1, 25), end_date=date(2026, 2, 1), auth=coach_auth)

    assert rows == [{"student_id": "s1"}]
    assert session.calls[0]["params"] == {"start_date": "2026-01-25", "end_date": "2026-02-01"}
    assert session.calls[1]["params"]["branch_id"] == "b2"


def test_export_without_content_is_backend_error(coach_auth):
    session = FakeSession(FakeResponse(payload={"success": True}))

    with pytest.raises(BackendError):
        _backend(session).export_csv(auth=coach_auth)


@pytest.mark.parametrize("payload", [[{"id": "s1"}], {"students": {"id": "s1"}}, "ok"])
def test_unexpected_roster_body_is_backend_error(coach_auth, payload):
    session = FakeSession(FakeResponse(payload=payload))

    with pytest.raises(BackendError):
        _backend(session).fetch_students(day=date(2026, 2, 1), auth=coach_auth)


def test_reports_body_must_be_an_object(coach_auth):
    session = FakeSession(FakeResponse(payload=[{"student_id": "s1"}]))

    with pytest.raises(BackendError):
        _backend(session).fetch_reports(branch_id="b1", start_date=date(2026, 1, 25), end_date=date(2026, 2, 1), auth=coach_auth)
