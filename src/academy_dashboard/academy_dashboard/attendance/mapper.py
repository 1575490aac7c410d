"""Translate backend JSON into roster records."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional

from ..common.datetime_utils import clock_time_from_iso, parse_iso_datetime
from ..core.constants import NO_COURSE_NAME, UNKNOWN_COURSE_NAME, UNKNOWN_STUDENT_NAME
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, make_record_id


def parse_status(value: Any, default: AttendanceStatus) -> AttendanceStatus:
    if not value:
        return default
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        return default


def _course_ref(course: dict[str, Any]) -> tuple[str, str]:
    course_id = course.get("id") or course.get("course_id") or ""
    name = course.get("name") or course.get("course_name") or UNKNOWN_COURSE_NAME
    return str(course_id), str(name)


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def records_from_students(
    students: Iterable[dict[str, Any]],
    *,
    day: date,
    default_status: AttendanceStatus,
) -> list[AttendanceRecord]:
    """One record per (student, course); duplicates collapse onto the last occurrence."""

    by_id: dict[str, AttendanceRecord] = {}
    for student in students:
        if not isinstance(student, dict):
            continue
        student_id = str(student.get("id") or student.get("student_id") or "")
        if not student_id:
            continue

        attendance = student.get("attendance")
        if not isinstance(attendance, dict):
            attendance = {}
        courses = [_course_ref(c) for c in (student.get("courses") or []) if isinstance(c, dict)]
        if not courses:
            courses = [("", NO_COURSE_NAME)]

        for course_id, course_name in courses:
            record = AttendanceRecord(
                record_id=make_record_id(student_id, day, course_id),
                student_id=student_id,
                student_name=str(student.get("full_name") or student.get("student_name") or UNKNOWN_STUDENT_NAME),
                course_id=course_id,
                course_name=course_name,
                date=day,
                status=parse_status(attendance.get("status"), default_status),
                branch_id=_optional_str(student.get("branch_id")),
                check_in_time=clock_time_from_iso(attendance.get("check_in_time")),
                check_out_time=clock_time_from_iso(attendance.get("check_out_time")),
                notes=str(attendance.get("notes") or ""),
            )
            # dict keeps first-insertion order, so re-assigning keeps roster order stable
            by_id[record.record_id] = record

    return list(by_id.values())


def record_from_report(row: dict[str, Any]) -> Optional[AttendanceRecord]:
    """Historical report row -> record. Rows without a usable date are skipped."""

    raw_date = row.get("attendance_date")
    if not raw_date:
        return None
    try:
        day = parse_iso_datetime(str(raw_date)).date()
    except ValueError:
        return None

    student_id = str(row.get("student_id") or "")
    if row.get("status"):
        status = parse_status(row.get("status"), AttendanceStatus.ABSENT)
    else:
        status = AttendanceStatus.PRESENT if row.get("is_present") else AttendanceStatus.ABSENT

    return AttendanceRecord(
        record_id=str(row.get("id") or f"{student_id}_{raw_date}"),
        student_id=student_id,
        student_name=str(row.get("student_name") or UNKNOWN_STUDENT_NAME),
        course_id=str(row.get("course_id") or ""),
        course_name=str(row.get("course_name") or UNKNOWN_COURSE_NAME),
        date=day,
        status=status,
        branch_id=_optional_str(row.get("branch_id")),
        check_in_time=clock_time_from_iso(row.get("check_in_time")),
        check_out_time=clock_time_from_iso(row.get("check_out_time")),
        notes=str(row.get("notes") or ""),
    )
