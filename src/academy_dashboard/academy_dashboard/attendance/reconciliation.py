from __future__ import annotations

from typing import Iterable

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceStats
from .store import AttendanceStore


def compute_stats(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    """Count statuses from scratch; present and late both count as attended."""

    counts = {status: 0 for status in AttendanceStatus}
    total = 0
    for record in records:
        counts[record.status] += 1
        total += 1

    attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE]
    rate = round(100 * attended / total, 2) if total else 0.0
    return AttendanceStats(
        total=total,
        present_count=counts[AttendanceStatus.PRESENT],
        absent_count=counts[AttendanceStatus.ABSENT],
        late_count=counts[AttendanceStatus.LATE],
        not_marked_count=counts[AttendanceStatus.NOT_MARKED],
        attendance_rate=rate,
    )


class ReconciliationEngine:
    """Read-only projections over the store's current view."""

    def __init__(self, store: AttendanceStore):
        self._store = store

    def stats(self) -> AttendanceStats:
        return compute_stats(self._store.view())

    def summary(self) -> dict:
        records = self._store.view()
        dirty = self._store.dirty_ids()
        return {
            "date": self._store.date.isoformat() if self._store.date else None,
            "state": self._store.state.value,
            "message": self._store.message,
            "stats": compute_stats(records).to_dict(),
            "has_unsaved_changes": bool(dirty),
            "dirty_ids": sorted(dirty),
        }
