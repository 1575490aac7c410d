from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..auth.context import AuthContext
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SAVE_STATE_CLEAR_SECONDS, DEFAULT_SAVE_WORKERS, DEFAULT_WORKSPACE_IDLE_SECONDS
from ..core.enums import SaveState
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, RosterFilter
from .reconciliation import ReconciliationEngine
from .repository import AttendanceBackend
from .save_state import SaveStateOverlay
from .store import AttendanceStore
from .sync import SyncController, SyncResult

logger = logging.getLogger(__name__)


@dataclass
class AttendanceWorkspace:
    """One user's roster session: store, derived stats and sync."""

    store: AttendanceStore
    engine: ReconciliationEngine
    sync: SyncController

    def to_ui(self) -> dict:
        save_states = self.sync.save_states()
        dirty = self.store.dirty_ids()
        rows = []
        for r in self.store.view():
            row = r.to_dict()
            row["status_label"] = r.status.label
            row["save_state"] = save_states.get(r.record_id, SaveState.IDLE).value
            row["dirty"] = r.record_id in dirty
            rows.append(row)

        data = self.engine.summary()
        data["records"] = rows
        return data


class AttendanceService:
    """Keeps an attendance workspace per signed-in user.

    Workspaces untouched for ``workspace_idle_seconds`` are evicted (and their
    save pools shut down) the next time any user's workspace is requested.
    """

    def __init__(
        self,
        backend: AttendanceBackend,
        *,
        max_save_workers: int = DEFAULT_SAVE_WORKERS,
        save_state_clear_seconds: float = DEFAULT_SAVE_STATE_CLEAR_SECONDS,
        workspace_idle_seconds: float = DEFAULT_WORKSPACE_IDLE_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._backend = backend
        self._max_save_workers = int(max_save_workers)
        self._save_state_clear_seconds = float(save_state_clear_seconds)
        self._idle_after = timedelta(seconds=workspace_idle_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._workspaces: dict[str, AttendanceWorkspace] = {}
        self._last_seen: dict[str, datetime] = {}

    def workspace_for(self, auth: AuthContext) -> AttendanceWorkspace:
        now = self._clock()
        with self._lock:
            expired = self._evict_idle_locked(now, keep=auth.user_id)
            ws = self._workspaces.get(auth.user_id)
            if ws is None:
                store = AttendanceStore(self._backend, auth, clock=self._clock)
                overlay = SaveStateOverlay(clear_after=self._save_state_clear_seconds, clock=self._clock)
                sync = SyncController(store, self._backend, overlay=overlay, max_workers=self._max_save_workers)
                ws = AttendanceWorkspace(store=store, engine=ReconciliationEngine(store), sync=sync)
                self._workspaces[auth.user_id] = ws
                logger.info("Created attendance workspace for user %s", auth.user_id)
            elif ws.store.auth != auth:
                ws.store.rebind(auth)
            self._last_seen[auth.user_id] = now

        for user_id, old in expired:
            logger.info("Dropped idle attendance workspace for user %s", user_id)
            old.sync.shutdown(wait=False)
        return ws

    def active_users(self) -> set[str]:
        with self._lock:
            return set(self._workspaces)

    def _evict_idle_locked(self, now: datetime, *, keep: str) -> list[tuple[str, AttendanceWorkspace]]:
        expired = []
        for user_id, seen in list(self._last_seen.items()):
            if user_id != keep and now - seen >= self._idle_after:
                del self._last_seen[user_id]
                expired.append((user_id, self._workspaces.pop(user_id)))
        return expired

    def load_roster(self, auth: AuthContext, day: date, filters: Optional[RosterFilter] = None) -> dict:
        ws = self.workspace_for(auth)
        ws.store.load(day, filters)
        return ws.to_ui()

    def roster(self, auth: AuthContext) -> dict:
        return self.workspace_for(auth).to_ui()

    def set_status(self, auth: AuthContext, record_id: str, status: str) -> AttendanceRecord:
        return self.workspace_for(auth).store.set_status(record_id, status)

    def discard(self, auth: AuthContext, record_id: str) -> AttendanceRecord:
        return self.workspace_for(auth).store.discard(record_id)

    def save_all(self, auth: AuthContext) -> SyncResult:
        ws = self.workspace_for(auth)
        if ws.store.date is None:
            raise ValidationError("Load a roster before saving")
        return ws.sync.save_all()

    def save_one(self, auth: AuthContext, record_id: str) -> AttendanceRecord:
        return self.workspace_for(auth).sync.save_one(record_id)

    def visible_records(self, auth: AuthContext) -> list[AttendanceRecord]:
        return self.workspace_for(auth).store.view()

    def drop(self, user_id: str) -> None:
        with self._lock:
            ws = self._workspaces.pop(user_id, None)
            self._last_seen.pop(user_id, None)
        if ws is not None:
            ws.sync.shutdown(wait=False)

    def shutdown(self) -> None:
        with self._lock:
            workspaces = list(self._workspaces.values())
            self._workspaces.clear()
            self._last_seen.clear()
        for ws in workspaces:
            ws.sync.shutdown(wait=False)
