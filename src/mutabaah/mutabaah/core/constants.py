"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DAY_KEY_PATTERN = r"^[0-9]{2}$"
MONTH_KEY_PATTERN = r"^[0-9]{4}-(0[1-9]|1[0-2])$"

DEFAULT_LIST_LIMIT = 200
DEFAULT_TIME_DRIFT_THRESHOLD_SECONDS = 300

PRAYER_IDS = ("subuh", "dzuhur", "ashar", "maghrib", "isya", "tahajud")
PRAYER_ACTIVITY_SUFFIX = "-default"
