from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from ..auth.context import AuthContext
from ..core.constants import EXPORT_CSV_HEADER
from ..core.exceptions import BackendUnavailableError
from .model import AttendanceRecord
from .repository import AttendanceBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFile:
    content: str
    filename: str
    source: str  # "backend" or "local"


def records_to_csv(records: Iterable[AttendanceRecord]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(EXPORT_CSV_HEADER)
    for r in records:
        writer.writerow(
            [
                r.student_name,
                r.course_name,
                r.date.isoformat(),
                r.status.label,
                r.check_in_time or "",
                r.check_out_time or "",
                r.notes or "",
            ]
        )
    return out.getvalue()


class AttendanceExportService:
    def __init__(self, backend: AttendanceBackend, *, today: Callable[[], date] = date.today):
        self._backend = backend
        self._today = today

    def export(self, auth: AuthContext, records: Iterable[AttendanceRecord]) -> ExportFile:
        """Prefer the backend export; build the CSV locally when it is unavailable.

        Authentication failures are raised, never replaced by local data.
        """

        auth.require_token()
        try:
            data = self._backend.export_csv(auth=auth)
            return ExportFile(
                content=str(data["content"]),
                filename=str(data.get("filename") or "attendance_report.csv"),
                source="backend",
            )
        except BackendUnavailableError as e:
            logger.warning("Backend export not available, using local data: %s", e)

        filename = f"attendance_report_{self._today().isoformat()}.csv"
        return ExportFile(content=records_to_csv(records), filename=filename, source="local")
