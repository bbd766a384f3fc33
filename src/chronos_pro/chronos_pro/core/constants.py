"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Face recognition (Euclidean distance between 128-d descriptors)
FACE_DESCRIPTOR_LENGTH = 128
FACE_MATCH_THRESHOLD = 0.45
FACE_SEARCH_THRESHOLD = 0.6
FACE_NEAR_MISS_DISTANCE = 0.6

# Geofencing
EARTH_RADIUS_METERS = 6371e3
DEFAULT_RADIUS_METERS = 100

# Timesheet grid: 4 entry/exit pairs per day
PUNCH_PAIRS_PER_DAY = 4

# Vacations
DEFAULT_VACATION_ENTITLEMENT = 22
MORNING_WINDOW = (time(9, 0), time(13, 0))
AFTERNOON_WINDOW = (time(14, 0), time(18, 0))
BASE_ENTITLEMENT_LABEL = "Base"

# Presence / coverage
PRESENCE_WINDOW_MINUTES = 10
DEFAULT_CALENDAR_COLOR = "#00E5FF"

DEFAULT_NOTIFICATION_LIMIT = 10
DEFAULT_WORK_START = time(9, 0)
DEFAULT_WORK_END = time(18, 0)
