"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CUTOFF_SETTING_KEY = "cutoffTime"
DEFAULT_CUTOFF_TIME = "08:00"

DEFAULT_PROVIDER_TIMEOUT_SECONDS = 8.0
DEFAULT_USER_AGENT = "attendance-app"
DEFAULT_GEOCODE_PROVIDER = "nominatim"

FLAG_COMMENT_MAX_LENGTH = 280

EXPORT_HEADERS = ("Date", "Time", "Employee", "Status", "Location", "Flag Comment")
EXPORT_SHEET_NAME = "Attendance"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
