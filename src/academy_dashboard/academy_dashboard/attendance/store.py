from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Union

from ..auth.context import AuthContext, default_status_for
from ..common.datetime_utils import format_clock_time, now_local
from ..core.constants import EMPTY_ROSTER_MESSAGE
from ..core.enums import AttendanceStatus, RosterState
from ..core.exceptions import BackendError, DomainError, ValidationError
from .mapper import records_from_students
from .model import AttendanceRecord, RosterFilter
from .repository import AttendanceBackend

logger = logging.getLogger(__name__)


class AttendanceStore:
    """Roster for the selected date, with local edits layered over server truth.

    ``_synced`` is the last roster confirmed by the backend, ``_edits`` the overlay
    of local changes and ``_dirty`` the ids whose edits are not yet confirmed.
    Every read and write goes through ``_lock``; no other component mutates the
    roster.
    """

    def __init__(
        self,
        backend: AttendanceBackend,
        auth: AuthContext,
        *,
        default_status: Optional[AttendanceStatus] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._backend = backend
        self._auth = auth
        self._default_status = default_status or default_status_for(auth.role)
        self._clock = clock

        self._lock = threading.Lock()
        self._generation = 0
        self._order: list[str] = []
        self._synced: dict[str, AttendanceRecord] = {}
        self._edits: dict[str, AttendanceRecord] = {}
        self._dirty: set[str] = set()
        self._date: Optional[date] = None
        self._filters = RosterFilter()
        self._requested: Optional[tuple[date, RosterFilter]] = None
        self._state = RosterState.IDLE
        self._message = ""

    # ----- loading -----

    def load(
        self,
        day: date,
        filters: Optional[RosterFilter] = None,
        *,
        preserve_edits: bool = False,
    ) -> list[AttendanceRecord]:
        """Replace the roster with the backend's view of ``day``.

        Each call takes a new generation; a response that arrives after a newer
        ``load`` was issued is dropped. Failures of the current generation leave
        an empty roster in ``RosterState.ERROR`` and are re-raised.
        """

        filters = filters or RosterFilter()
        with self._lock:
            self._generation += 1
            generation = self._generation
            auth = self._auth
            self._requested = (day, filters)
            self._state = RosterState.LOADING
            self._message = ""

        logger.info("Loading roster for %s (generation %s)", day.isoformat(), generation)
        try:
            auth.require_token()
            students = self._backend.fetch_students(day=day, auth=auth)
            try:
                records = records_from_students(students, day=day, default_status=self._default_status)
            except (AttributeError, TypeError, ValueError) as e:
                raise BackendError(f"Unreadable roster payload: {e}") from e
        except DomainError as e:
            with self._lock:
                if generation != self._generation:
                    logger.info("Ignoring failure of stale roster load %s: %s", generation, e)
                    return self._view_locked()
                self._replace_locked(day, filters, [], preserve_edits=False)
                self._state = RosterState.ERROR
                self._message = f"Failed to load attendance data: {e}"
            logger.warning("Roster load for %s failed: %s", day.isoformat(), e)
            raise

        with self._lock:
            if generation != self._generation:
                logger.info("Discarding stale roster for %s (generation %s)", day.isoformat(), generation)
                return self._view_locked()
            self._replace_locked(day, filters, records, preserve_edits=preserve_edits)
            if records:
                self._state = RosterState.READY
            else:
                self._state = RosterState.EMPTY
                self._message = EMPTY_ROSTER_MESSAGE
            logger.info("Roster for %s loaded with %s records", day.isoformat(), len(records))
            return self._view_locked()

    def reload(self, *, preserve_edits: bool = True) -> list[AttendanceRecord]:
        """Re-fetch the most recently requested date, even if that load is still in flight."""
        with self._lock:
            requested = self._requested
        if requested is None:
            raise ValidationError("No roster has been loaded yet")
        day, filters = requested
        return self.load(day, filters, preserve_edits=preserve_edits)

    def _replace_locked(
        self,
        day: date,
        filters: RosterFilter,
        records: list[AttendanceRecord],
        *,
        preserve_edits: bool,
    ) -> None:
        kept_edits: dict[str, AttendanceRecord] = {}
        if preserve_edits:
            ids = {r.record_id for r in records}
            kept_edits = {rid: rec for rid, rec in self._edits.items() if rid in ids and rid in self._dirty}

        self._date = day
        self._filters = filters
        self._order = [r.record_id for r in records]
        self._synced = {r.record_id: r for r in records}
        self._edits = kept_edits
        self._dirty = set(kept_edits)

    # ----- local edits -----

    def set_status(self, record_id: str, status: Union[AttendanceStatus, str]) -> AttendanceRecord:
        """Local-only status change; the record becomes dirty until a confirmed save."""

        try:
            status = AttendanceStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {status!r}") from None
        if status == AttendanceStatus.NOT_MARKED:
            raise ValidationError("Attendance can only be marked present, absent or late")

        with self._lock:
            current = self._current_locked(record_id)
            if status == AttendanceStatus.ABSENT:
                updated = replace(current, status=status, check_in_time=None, check_out_time=None)
            elif current.status == status and current.check_in_time:
                updated = current
            else:
                updated = replace(current, status=status, check_in_time=format_clock_time(self._clock()))

            self._edits[record_id] = updated
            self._dirty.add(record_id)
            return updated

    def discard(self, record_id: str) -> AttendanceRecord:
        """Drop the local edit of one record, falling back to the synced value."""
        with self._lock:
            self._current_locked(record_id)
            self._edits.pop(record_id, None)
            self._dirty.discard(record_id)
            return self._synced[record_id]

    def confirm_saved(self, record: AttendanceRecord) -> bool:
        """Merge a backend-confirmed record into the synced layer.

        Returns False when the record is no longer in the roster or was edited
        again while its save was in flight; it then stays dirty.
        """

        with self._lock:
            rid = record.record_id
            if rid not in self._synced:
                return False
            edit = self._edits.get(rid)
            if edit is not None and edit != record:
                return False
            self._synced[rid] = record
            self._edits.pop(rid, None)
            self._dirty.discard(rid)
            return True

    def mark_failed(self, record_id: str) -> None:
        with self._lock:
            if record_id in self._synced:
                self._dirty.add(record_id)

    # ----- reads -----

    def get(self, record_id: str) -> AttendanceRecord:
        with self._lock:
            return self._current_locked(record_id)

    def snapshot(self) -> list[AttendanceRecord]:
        with self._lock:
            return [self._edits.get(rid) or self._synced[rid] for rid in self._order]

    def view(self) -> list[AttendanceRecord]:
        with self._lock:
            return self._view_locked()

    def set_filters(self, filters: RosterFilter) -> list[AttendanceRecord]:
        with self._lock:
            self._filters = filters
            if self._requested is not None:
                self._requested = (self._requested[0], filters)
            return self._view_locked()

    def dirty_ids(self) -> set[str]:
        with self._lock:
            return set(self._dirty)

    def is_record_dirty(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._dirty

    @property
    def is_dirty(self) -> bool:
        with self._lock:
            return bool(self._dirty)

    @property
    def state(self) -> RosterState:
        return self._state

    @property
    def message(self) -> str:
        return self._message

    @property
    def date(self) -> Optional[date]:
        return self._date

    @property
    def filters(self) -> RosterFilter:
        return self._filters

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def auth(self) -> AuthContext:
        return self._auth

    def rebind(self, auth: AuthContext) -> None:
        """Use a fresh auth context (e.g. after re-login); local edits are kept."""
        with self._lock:
            self._auth = auth

    def _current_locked(self, record_id: str) -> AttendanceRecord:
        record = self._edits.get(record_id) or self._synced.get(record_id)
        if record is None:
            raise ValidationError("Attendance record not found")
        return record

    def _view_locked(self) -> list[AttendanceRecord]:
        records = (self._edits.get(rid) or self._synced[rid] for rid in self._order)
        return [r for r in records if self._filters.matches(r)]
