"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_REQUIRED_PERCENTAGE = 75
DEFAULT_SESSION_DAYS = 7
DEFAULT_RECENT_RECORDS = 20
DEFAULT_REMINDER_MINUTES = 15
DEFAULT_NOTIFICATION_INTERVAL_SECONDS = 60

# Standing bands: "warning" covers the 10 points below the requirement.
WARNING_BAND = 10
EXCELLENT_MARGIN = 10
PERFECT_MIN_CLASSES = 10
NOTIFICATION_INBOX_LIMIT = 50

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
