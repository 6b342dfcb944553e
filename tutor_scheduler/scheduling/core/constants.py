"""
Constants shared by the slot ranking engine.
"""

import enum


class LessonStatus(str, enum.Enum):
    PLANNED = "PLANNED"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


# Day periods in priority order: the first enabled period containing the hour wins
PERIOD_ORDER = ("morning", "day", "evening")

# [start_hour, end_hour) for each period, local wall-clock hours
PERIOD_HOURS = {
    "morning": (6, 12),
    "day": (12, 18),
    "evening": (18, 23),
}

# Score used when no preference applies
NEUTRAL_SCORE = 0.5

# Working-day scores (0=Sunday .. 6=Saturday)
WORKING_DAY_SCORE = 1.0
NON_WORKING_DAY_SCORE = 0.3

# Priority scores
VIP_PRIORITY_SCORE = 1.0
REGULAR_PRIORITY_SCORE = 0.5

# Conflicted slots stay visible but sink to the bottom
CONFLICT_PENALTY = 0.1

# Default teacher preferences, used when a teacher has no stored weights yet
DEFAULT_W_TIME = 0.33
DEFAULT_W_COMPACT = 0.33
DEFAULT_W_PRIORITY = 0.34
DEFAULT_WORKING_DAYS = [1, 2, 3, 4, 5]
DEFAULT_PREFERRED_TIMES = {
    "morning": {"enabled": False, "weight": 0.5},
    "day": {"enabled": True, "weight": 0.7},
    "evening": {"enabled": False, "weight": 0.5},
}
DEFAULT_MIN_GAP_MINUTES = 60
DEFAULT_MAX_GAP_MINUTES = 180
DEFAULT_GAP_IMPORTANCE = 0.5

# Allowed range for period weights and gap importance
PREFERENCE_WEIGHT_MIN = 0.1
PREFERENCE_WEIGHT_MAX = 0.9

# How far the three base weights may drift from 1.0 before we warn
WEIGHT_SUM_TOLERANCE = 0.1
