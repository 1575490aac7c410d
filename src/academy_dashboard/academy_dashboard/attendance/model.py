from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


def make_record_id(student_id: str, day: date, course_id: str = "") -> str:
    """Stable roster id for (student, date, course); re-fetching yields the same id."""
    base = f"{student_id}_{day.isoformat()}"
    return f"{base}_{course_id}" if course_id else base


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one roster row per (student, course, date)."""

    record_id: str
    student_id: str
    student_name: str
    course_id: str
    course_name: str
    date: date
    status: AttendanceStatus
    branch_id: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    notes: str = ""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class AttendanceStats:
    """Derived from the roster on demand, never persisted."""

    total: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    not_marked_count: int = 0
    attendance_rate: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_students": self.total,
            "present_today": self.present_count,
            "absent_today": self.absent_count,
            "late_today": self.late_count,
            "not_marked_today": self.not_marked_count,
            "attendance_rate": self.attendance_rate,
        }


@dataclass(frozen=True)
class RosterFilter:
    """Narrows the visible roster; the loaded roster itself is unchanged."""

    search: str = ""
    course_id: Optional[str] = None
    branch_id: Optional[str] = None

    def matches(self, record: AttendanceRecord) -> bool:
        if self.course_id and record.course_id != self.course_id:
            return False
        if self.branch_id and record.branch_id != self.branch_id:
            return False
        term = (self.search or "").strip().lower()
        if term:
            return term in record.student_name.lower() or term in record.course_name.lower()
        return True
