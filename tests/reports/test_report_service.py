from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.academy_dashboard.academy_dashboard.core.exceptions import ValidationError
from src.academy_dashboard.academy_dashboard.reports.service import AttendanceReportService

TODAY = date(2026, 2, 1)


def _row(student_id, name, day, status=None, **extra):
    row = {"student_id": student_id, "student_name": name, "attendance_date": f"{day}T10:00:00Z", **extra}
    if status:
        row["status"] = status
    return row


@pytest.fixture
def service(backend):
    return AttendanceReportService(backend, today=lambda: TODAY)


def test_defaults_to_last_week_of_own_branch(service, backend, coach_auth):
    service.build_report(coach_auth)

    assert backend.report_args == {
        "branch_id": "b1",
        "start_date": date(2026, 1, 25),
        "end_date": TODAY,
    }


def test_explicit_branch_overrides_own(service, backend, coach_auth):
    service.build_report(coach_auth, branch_id="b7")

    assert backend.report_args["branch_id"] == "b7"


def test_user_without_branch_is_rejected(service, coach_auth):
    with pytest.raises(ValidationError, match="not assigned to any branch"):
        service.build_report(replace(coach_auth, branch_id=None))


def test_inverted_range_is_rejected(service, coach_auth):
    with pytest.raises(ValidationError):
        service.build_report(coach_auth, start=date(2026, 2, 5), end=date(2026, 2, 1))


def test_rows_sorted_newest_first_and_summarised_per_student(service, backend, coach_auth):
    backend.reports = [
        _row("s1", "Alice Chen", "2026-01-29", "present"),
        _row("s1", "Alice Chen", "2026-01-30", "late"),
        _row("s1", "Alice Chen", "2026-01-31", "absent"),
        _row("s2", "Bruno Diaz", "2026-01-30", is_present=True),
        _row("s2", "Bruno Diaz", "2026-01-31", is_present=True),
        {"student_id": "s3", "student_name": "No Date"},
    ]

    report = service.build_report(coach_auth)

    assert [(r.date.isoformat(), r.student_name) for r in report.rows] == [
        ("2026-01-31", "Bruno Diaz"),
        ("2026-01-31", "Alice Chen"),
        ("2026-01-30", "Bruno Diaz"),
        ("2026-01-30", "Alice Chen"),
        ("2026-01-29", "Alice Chen"),
    ]
    assert report.summary == [
        {
            "student_id": "s2",
            "student_name": "Bruno Diaz",
            "total_sessions": 2,
            "present": 2,
            "absent": 0,
            "late": 0,
            "attendance_rate": 100.0,
        },
        {
            "student_id": "s1",
            "student_name": "Alice Chen",
            "total_sessions": 3,
            "present": 1,
            "absent": 1,
            "late": 1,
            "attendance_rate": 66.67,
        },
    ]
    assert report.stats.total == 5


def test_empty_report(service, coach_auth):
    report = service.build_report(coach_auth)

    assert report.rows == []
    assert report.summary == []
    assert report.stats.attendance_rate == 0.0
