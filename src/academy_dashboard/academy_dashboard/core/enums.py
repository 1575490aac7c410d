from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Dashboard roles; decides roster defaults and route access."""

    SUPER_ADMIN = "super_admin"
    BRANCH_MANAGER = "branch_manager"
    COACH = "coach"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status as exchanged with the backend."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    NOT_MARKED = "not_marked"

    @property
    def label(self) -> str:
        return "Not Marked" if self is AttendanceStatus.NOT_MARKED else self.value.capitalize()


WRITABLE_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.LATE})


class SaveState(str, Enum):
    """Per-record save overlay shown next to each roster row."""

    IDLE = "idle"
    SAVING = "saving"
    SUCCESS = "success"
    ERROR = "error"


class RosterState(str, Enum):
    """Lifecycle of the loaded roster."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"
