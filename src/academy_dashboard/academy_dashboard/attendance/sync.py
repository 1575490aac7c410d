from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from ..auth.context import AuthContext
from ..common.datetime_utils import attendance_instant, long_date, now_utc
from ..core.constants import DEFAULT_SAVE_WORKERS
from ..core.enums import WRITABLE_STATUSES, AttendanceStatus, SaveState
from ..core.exceptions import AuthError, DomainError, ValidationError
from .model import AttendanceRecord
from .repository import AttendanceBackend
from .save_state import SaveStateOverlay
from .store import AttendanceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    success_count: int
    error_count: int
    cycle: int
    skipped_count: int = 0
    auth_failed: bool = False
    refresh: Optional[Future] = None

    @property
    def message(self) -> str:
        if self.error_count:
            return f"Saved {self.success_count} records, {self.error_count} failed."
        return f"Successfully saved attendance for all {self.success_count} students"

    def to_dict(self) -> dict:
        return {
            "success_count": self.success_count,
            "error_count": self.error_count,
            "skipped_count": self.skipped_count,
            "cycle": self.cycle,
            "message": self.message,
        }


def build_mark_payload(record: AttendanceRecord, auth: AuthContext, *, now: datetime) -> dict[str, Any]:
    """Body of ``POST /api/attendance/mark`` for one roster record."""

    role = auth.role.value.replace("_", " ")
    return {
        "user_id": record.student_id,
        "user_type": "student",
        "course_id": record.course_id,
        "branch_id": record.branch_id or auth.branch_id or "",
        "attendance_date": attendance_instant(record.date).isoformat(),
        "status": record.status.value,
        "check_in_time": None if record.status == AttendanceStatus.ABSENT else now.isoformat(),
        "notes": record.notes or f"Saved by {role}: {auth.display_name} for {long_date(record.date)}",
    }


class SyncController:
    """Writes roster records to the backend, one request per record.

    Batches are serialised by ``_batch_lock`` and numbered by ``cycle``; within a
    batch the writes run on a thread pool and results are applied by record id
    in whatever order they complete. A failing record never stops its siblings.
    """

    def __init__(
        self,
        store: AttendanceStore,
        backend: AttendanceBackend,
        *,
        overlay: Optional[SaveStateOverlay] = None,
        max_workers: int = DEFAULT_SAVE_WORKERS,
        utc_clock: Callable[[], datetime] = now_utc,
    ):
        self._store = store
        self._backend = backend
        self._overlay = overlay or SaveStateOverlay()
        self._executor = ThreadPoolExecutor(max_workers=max(1, int(max_workers)), thread_name_prefix="attendance-sync")
        self._utc_clock = utc_clock
        self._batch_lock = threading.Lock()
        self._cycle = 0

    def save_all(self, records: Optional[Iterable[AttendanceRecord]] = None) -> SyncResult:
        """Persist every record of the current view (or ``records``)."""

        auth = self._store.auth
        auth.require_token()

        with self._batch_lock:
            self._cycle += 1
            cycle = self._cycle
            generation = self._store.generation

            batch = list(records) if records is not None else self._store.view()
            unique = {r.record_id: r for r in batch}
            writable = [r for r in unique.values() if r.status in WRITABLE_STATUSES]
            skipped = len(unique) - len(writable)

            futures: dict[Future, AttendanceRecord] = {}
            for record in writable:
                if not self._overlay.begin(record.record_id):
                    skipped += 1
                    continue
                futures[self._executor.submit(self._write, record, auth)] = record

            logger.info("Save cycle %s: writing %s records (%s skipped)", cycle, len(futures), skipped)

            success_count = 0
            error_count = 0
            auth_failed = False
            for future in as_completed(futures):
                record = futures[future]
                try:
                    future.result()
                except AuthError as e:
                    auth_failed = True
                    error_count += 1
                    self._record_failed(record, e)
                except Exception as e:
                    error_count += 1
                    self._record_failed(record, e)
                else:
                    success_count += 1
                    self._overlay.set(record.record_id, SaveState.SUCCESS)
                    self._store.confirm_saved(record)

            refresh = None
            if error_count == 0 and success_count:
                refresh = self._executor.submit(self._refresh, generation)
            elif error_count:
                logger.warning("Save cycle %s: saved %s records, %s failed", cycle, success_count, error_count)

            return SyncResult(
                success_count=success_count,
                error_count=error_count,
                cycle=cycle,
                skipped_count=skipped,
                auth_failed=auth_failed,
                refresh=refresh,
            )

    def save_one(self, record_id: str) -> AttendanceRecord:
        """Write a single record right away; rejected while that record is saving."""

        auth = self._store.auth
        auth.require_token()
        record = self._store.get(record_id)
        if record.status not in WRITABLE_STATUSES:
            raise ValidationError("Mark the student present, absent or late before saving")
        if not self._overlay.begin(record_id):
            raise ValidationError("Attendance for this student is already being saved")

        try:
            self._write(record, auth)
        except DomainError as e:
            self._record_failed(record, e)
            raise
        self._overlay.set(record_id, SaveState.SUCCESS)
        self._store.confirm_saved(record)
        return record

    def save_state(self, record_id: str) -> SaveState:
        return self._overlay.get(record_id)

    def save_states(self) -> dict[str, SaveState]:
        return self._overlay.snapshot()

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _write(self, record: AttendanceRecord, auth: AuthContext) -> dict[str, Any]:
        payload = build_mark_payload(record, auth, now=self._utc_clock())
        return self._backend.mark_attendance(payload=payload, auth=auth)

    def _record_failed(self, record: AttendanceRecord, error: Exception) -> None:
        if isinstance(error, DomainError):
            logger.warning("Failed to save attendance for %s: %s", record.student_name, error)
        else:
            logger.exception("Unexpected error saving attendance for %s", record.student_name, exc_info=error)
        self._overlay.set(record.record_id, SaveState.ERROR)
        self._store.mark_failed(record.record_id)

    def _refresh(self, generation: int) -> list[AttendanceRecord]:
        if self._store.generation != generation:
            # a newer load was issued after the batch started; it wins
            logger.info("Skipping roster refresh: roster moved past generation %s", generation)
            return self._store.view()
        try:
            return self._store.reload(preserve_edits=True)
        except DomainError as e:
            logger.warning("Background roster refresh failed: %s", e)
            raise
