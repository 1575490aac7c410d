from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SAVE_STATE_CLEAR_SECONDS
from ..core.enums import SaveState


class SaveStateOverlay:
    """Ephemeral per-record save status keyed by record id.

    ``success`` reads back as ``idle`` once ``clear_after`` has elapsed; expiry is
    evaluated on read, so no timers are needed.
    """

    def __init__(
        self,
        *,
        clear_after: float = DEFAULT_SAVE_STATE_CLEAR_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._clear_after = timedelta(seconds=clear_after)
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[SaveState, datetime]] = {}

    def set(self, record_id: str, state: SaveState) -> None:
        with self._lock:
            if state == SaveState.IDLE:
                self._entries.pop(record_id, None)
            else:
                self._entries[record_id] = (state, self._clock())

    def get(self, record_id: str) -> SaveState:
        with self._lock:
            return self._read(record_id, self._clock())

    def snapshot(self) -> dict[str, SaveState]:
        """Every non-idle entry."""
        with self._lock:
            now = self._clock()
            out = {}
            for record_id in list(self._entries):
                state = self._read(record_id, now)
                if state != SaveState.IDLE:
                    out[record_id] = state
            return out

    def begin(self, record_id: str) -> bool:
        """Mark ``saving`` unless a save for this record is already outstanding."""
        with self._lock:
            if self._read(record_id, self._clock()) == SaveState.SAVING:
                return False
            self._entries[record_id] = (SaveState.SAVING, self._clock())
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _read(self, record_id: str, now: datetime) -> SaveState:
        entry: Optional[tuple[SaveState, datetime]] = self._entries.get(record_id)
        if entry is None:
            return SaveState.IDLE
        state, at = entry
        if state == SaveState.SUCCESS and now - at >= self._clear_after:
            del self._entries[record_id]
            return SaveState.IDLE
        return state
