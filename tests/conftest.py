from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.academy_dashboard.academy_dashboard.attendance.store import AttendanceStore
from src.academy_dashboard.academy_dashboard.auth.context import AuthContext
from src.academy_dashboard.academy_dashboard.core.enums import Role
from tests.fakes import FakeBackend, student_payload

ROSTER_DAY = date(2026, 2, 1)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 30, 0)


@pytest.fixture
def fixed_utc() -> datetime:
    return datetime(2026, 2, 1, 8, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def roster_day() -> date:
    return ROSTER_DAY


@pytest.fixture
def coach_auth() -> AuthContext:
    return AuthContext(token="tok-123", user_id="coach-1", full_name="Coach Carter", role=Role.COACH, branch_id="b1")


@pytest.fixture
def manager_auth() -> AuthContext:
    return AuthContext(token="tok-456", user_id="bm-1", full_name="Maria", role=Role.BRANCH_MANAGER, branch_id="b1")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(
        {
            ROSTER_DAY: [
                student_payload("s1", "Alice Chen"),
                student_payload("s2", "Bruno Diaz"),
                student_payload("s3", "Chloe Evans", courses=(("c2", "Advanced Taekwondo"),)),
            ]
        }
    )


@pytest.fixture
def store(backend, coach_auth, fixed_now) -> AttendanceStore:
    return AttendanceStore(backend, coach_auth, clock=lambda: fixed_now)
