from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..auth.context import AuthContext
from .repository import AttendanceBackend

DEMO_NOTE = "Demo data - not from the academy backend"


class DemoAttendanceBackend(AttendanceBackend):
    """Sandbox backend for DEMO_MODE.

    Only wired in when explicitly configured; a real backend failure never falls
    back to this data.
    """

    def __init__(self):
        self.marked: list[dict[str, Any]] = []

    def fetch_students(self, *, day: date, auth: AuthContext) -> Sequence[dict[str, Any]]:
        auth.require_token()
        branch_id = auth.branch_id or "demo-branch"
        return [
            {
                "id": "STU001",
                "full_name": "John Smith",
                "branch_id": branch_id,
                "courses": [{"id": "COURSE001", "name": "Karate Basics"}],
                "attendance": {"status": "present", "notes": DEMO_NOTE},
            },
            {
                "id": "STU002",
                "full_name": "Sarah Johnson",
                "branch_id": branch_id,
                "courses": [{"id": "COURSE002", "name": "Advanced Taekwondo"}],
                "attendance": {"status": "late", "notes": DEMO_NOTE},
            },
            {
                "id": "STU003",
                "full_name": "Mike Johnson",
                "branch_id": branch_id,
                "courses": [{"id": "COURSE001", "name": "Karate Basics"}],
                "attendance": {"notes": DEMO_NOTE},
            },
        ]

    def mark_attendance(self, *, payload: dict[str, Any], auth: AuthContext) -> dict[str, Any]:
        auth.require_token()
        self.marked.append(dict(payload))
        return {"success": True, "demo": True}

    def fetch_reports(
        self,
        *,
        branch_id: Optional[str],
        start_date: date,
        end_date: date,
        auth: AuthContext,
    ) -> Sequence[dict[str, Any]]:
        auth.require_token()
        return [
            {
                "student_id": p["user_id"],
                "course_id": p["course_id"],
                "branch_id": p["branch_id"],
                "attendance_date": p["attendance_date"],
                "status": p["status"],
                "check_in_time": p["check_in_time"],
                "notes": DEMO_NOTE,
            }
            for p in self.marked
            if start_date.isoformat() <= p["attendance_date"][:10] <= end_date.isoformat()
        ]

    def export_csv(self, *, auth: AuthContext) -> dict[str, Any]:
        auth.require_token()
        return {"content": "Student Name,Course,Date,Status\n", "filename": "demo_attendance.csv"}
