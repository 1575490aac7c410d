from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Optional

from ..attendance.mapper import record_from_report
from ..attendance.model import AttendanceRecord, AttendanceStats
from ..attendance.reconciliation import compute_stats
from ..attendance.repository import AttendanceBackend
from ..auth.context import AuthContext
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ReportData:
    rows: list[AttendanceRecord]
    summary: list[dict]
    stats: AttendanceStats = field(default_factory=AttendanceStats)


class AttendanceReportService:
    """Historical attendance for a branch over a date range."""

    def __init__(self, backend: AttendanceBackend, *, today: Callable[[], date] = date.today):
        self._backend = backend
        self._today = today

    def default_range(self) -> tuple[date, date]:
        end = self._today()
        return end - timedelta(days=DEFAULT_REPORT_DAYS), end

    def build_report(
        self,
        auth: AuthContext,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        branch_id: Optional[str] = None,
    ) -> ReportData:
        default_start, default_end = self.default_range()
        start = start or default_start
        end = end or default_end
        require_date_range(start, end)

        branch_id = branch_id or auth.branch_id
        if not branch_id:
            raise ValidationError("You are not assigned to any branch")

        raw = self._backend.fetch_reports(branch_id=branch_id, start_date=start, end_date=end, auth=auth)
        rows = [r for r in (record_from_report(item) for item in raw if isinstance(item, dict)) if r is not None]
        rows.sort(key=lambda r: (r.date, r.student_name), reverse=True)

        by_student: dict[str, list[AttendanceRecord]] = {}
        for r in rows:
            by_student.setdefault(r.student_id, []).append(r)

        summary = []
        for student_id, records in by_student.items():
            stats = compute_stats(records)
            summary.append(
                {
                    "student_id": student_id,
                    "student_name": records[0].student_name,
                    "total_sessions": stats.total,
                    "present": stats.present_count,
                    "absent": stats.absent_count,
                    "late": stats.late_count,
                    "attendance_rate": stats.attendance_rate,
                }
            )

        summary.sort(key=lambda x: (-x["attendance_rate"], x["student_name"]))
        return ReportData(rows=rows, summary=summary, stats=compute_stats(rows))
