"""Example: drive the attendance workflow through the service layer (no Flask).

Runs against the sandbox backend, so no academy server is needed.
"""

from datetime import date

from src.academy_dashboard.academy_dashboard.attendance.demo_repository import DemoAttendanceBackend
from src.academy_dashboard.academy_dashboard.attendance.service import AttendanceService
from src.academy_dashboard.academy_dashboard.auth.context import AuthContext
from src.academy_dashboard.academy_dashboard.core.enums import Role


def main():
    auth = AuthContext(token="demo-token", user_id="coach-1", full_name="Demo Coach", role=Role.COACH, branch_id="b1")
    service = AttendanceService(DemoAttendanceBackend())

    roster = service.load_roster(auth, date.today())
    first = roster["records"][0]["record_id"]
    service.set_status(auth, first, "late")

    result = service.save_all(auth)
    print(result.message)
    if result.refresh is not None:
        result.refresh.result()
    print(service.roster(auth)["stats"])
    service.shutdown()


if __name__ == "__main__":
    main()
