from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.demo_repository import DemoAttendanceBackend
from .attendance.export import AttendanceExportService
from .attendance.http_repository import HttpAttendanceBackend
from .attendance.repository import AttendanceBackend
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SAVE_STATE_CLEAR_SECONDS,
    DEFAULT_SAVE_WORKERS,
    DEFAULT_WORKSPACE_IDLE_SECONDS,
)
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class AppSettings:
    api_base_url: str
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_save_workers: int = DEFAULT_SAVE_WORKERS
    save_state_clear_seconds: float = DEFAULT_SAVE_STATE_CLEAR_SECONDS
    workspace_idle_seconds: float = DEFAULT_WORKSPACE_IDLE_SECONDS
    demo_mode: bool = False

    @classmethod
    def from_module(cls, settings: Any) -> "AppSettings":
        return cls(
            api_base_url=str(getattr(settings, "API_BASE_URL")),
            request_timeout=float(getattr(settings, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)),
            max_save_workers=int(getattr(settings, "MAX_SAVE_WORKERS", DEFAULT_SAVE_WORKERS)),
            save_state_clear_seconds=float(getattr(settings, "SAVE_STATE_CLEAR_SECONDS", DEFAULT_SAVE_STATE_CLEAR_SECONDS)),
            workspace_idle_seconds=float(getattr(settings, "WORKSPACE_IDLE_SECONDS", DEFAULT_WORKSPACE_IDLE_SECONDS)),
            demo_mode=bool(getattr(settings, "DEMO_MODE", False)),
        )


@dataclass(frozen=True)
class Container:
    settings: AppSettings
    backend: AttendanceBackend

    attendance_service: AttendanceService
    export_service: AttendanceExportService
    report_service: AttendanceReportService


def build_container(*, settings: AppSettings, backend: Optional[AttendanceBackend] = None) -> Container:
    if backend is None:
        if settings.demo_mode:
            backend = DemoAttendanceBackend()
        else:
            backend = HttpAttendanceBackend(settings.api_base_url, timeout=settings.request_timeout)

    attendance_service = AttendanceService(
        backend,
        max_save_workers=settings.max_save_workers,
        save_state_clear_seconds=settings.save_state_clear_seconds,
        workspace_idle_seconds=settings.workspace_idle_seconds,
    )

    return Container(
        settings=settings,
        backend=backend,
        attendance_service=attendance_service,
        export_service=AttendanceExportService(backend),
        report_service=AttendanceReportService(backend),
    )
