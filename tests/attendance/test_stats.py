from __future__ import annotations

import itertools
import random
from datetime import date

from src.academy_dashboard.academy_dashboard.attendance.model import AttendanceRecord, AttendanceStats
from src.academy_dashboard.academy_dashboard.attendance.reconciliation import ReconciliationEngine, compute_stats
from src.academy_dashboard.academy_dashboard.core.enums import AttendanceStatus


def _rec(idx: int, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=f"s{idx}_2026-02-01_c1",
        student_id=f"s{idx}",
        student_name=f"Student {idx}",
        course_id="c1",
        course_name="Karate Basics",
        date=date(2026, 2, 1),
        status=status,
    )


def test_present_absent_late_example():
    records = [_rec(1, AttendanceStatus.PRESENT), _rec(2, AttendanceStatus.ABSENT), _rec(3, AttendanceStatus.LATE)]

    stats = compute_stats(records)

    assert stats == AttendanceStats(
        total=3,
        present_count=1,
        absent_count=1,
        late_count=1,
        not_marked_count=0,
        attendance_rate=66.67,
    )


def test_empty_roster_yields_zero_stats():
    stats = compute_stats([])

    assert stats == AttendanceStats()
    assert stats.attendance_rate == 0
    assert stats.to_dict()["total_students"] == 0


def test_rate_and_counts_for_every_small_distribution():
    for present, absent, late, not_marked in itertools.product(range(4), repeat=4):
        statuses = (
            [AttendanceStatus.PRESENT] * present
            + [AttendanceStatus.ABSENT] * absent
            + [AttendanceStatus.LATE] * late
            + [AttendanceStatus.NOT_MARKED] * not_marked
        )
        stats = compute_stats(_rec(i, s) for i, s in enumerate(statuses))
        total = len(statuses)

        assert stats.total == total
        assert stats.present_count + stats.absent_count + stats.late_count + stats.not_marked_count == total
        if total == 0:
            assert stats.attendance_rate == 0
        else:
            assert stats.attendance_rate == round(100 * (present + late) / total, 2)


def test_counts_conserved_after_any_sequence_of_status_changes(store, roster_day):
    store.load(roster_day)
    engine = ReconciliationEngine(store)
    ids = [r.record_id for r in store.snapshot()]
    rng = random.Random(7)
    choices = [AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.LATE]

    for _ in range(50):
        store.set_status(rng.choice(ids), rng.choice(choices))
        stats = engine.stats()
        assert stats.total == len(ids)
        assert stats.present_count + stats.absent_count + stats.late_count + stats.not_marked_count == stats.total


def test_summary_reports_unsaved_changes(store, roster_day):
    store.load(roster_day)
    engine = ReconciliationEngine(store)
    assert engine.summary()["has_unsaved_changes"] is False

    store.set_status("s1_2026-02-01_c1", "present")
    summary = engine.summary()

    assert summary["has_unsaved_changes"] is True
    assert summary["dirty_ids"] == ["s1_2026-02-01_c1"]
    assert summary["stats"]["present_today"] == 1
    assert summary["state"] == "ready"
