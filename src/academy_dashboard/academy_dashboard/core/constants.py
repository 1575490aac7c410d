"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_SAVE_WORKERS = 4
DEFAULT_SAVE_STATE_CLEAR_SECONDS = 3
DEFAULT_REPORT_DAYS = 7
DEFAULT_WORKSPACE_IDLE_SECONDS = 8 * 60 * 60

# Backend stores attendance per calendar day; every write uses this UTC time.
ATTENDANCE_TIME_OF_DAY = time(10, 0)

NO_COURSE_NAME = "No Course Assigned"
UNKNOWN_STUDENT_NAME = "Unknown Student"
UNKNOWN_COURSE_NAME = "Unknown Course"

EMPTY_ROSTER_MESSAGE = (
    "No students found. Please ensure students are assigned to your courses "
    "or contact the administrator."
)

EXPORT_CSV_HEADER = ["Student Name", "Course", "Date", "Status", "Check In", "Check Out", "Notes"]
