"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BREAK_MINUTES = 30
WEEK_WINDOW_DAYS = 7

UNKNOWN_WORKER_NAME = "Unknown Employee"
UNKNOWN_PROJECT_NAME = "Unknown Project"
UNASSIGNED_PROJECT_NAME = "Unassigned"
