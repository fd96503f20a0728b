"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_POLL_INTERVAL_MS = 500
DEFAULT_CAMERA_INDEX = 0
REAR_FACING = "environment"
ISO_DATE_FORMAT = "%Y-%m-%d"
MIRROR_SHEET_NAME = "Attendance"
MIRROR_COLUMNS = ("date", "id", "name", "status")
