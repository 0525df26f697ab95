"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Domain-tuned distance cut-off for face descriptors; override with MATCH_THRESHOLD.
DEFAULT_MATCH_THRESHOLD = 0.6
RECENT_DATES_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 5
STATE_FORMAT_VERSION = 1
