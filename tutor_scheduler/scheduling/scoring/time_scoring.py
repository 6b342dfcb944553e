"""
Calendar-based scoring functions for slot evaluation.
"""

from datetime import datetime
from typing import Iterable
from ..core.constants import (
    PERIOD_HOURS,
    NEUTRAL_SCORE,
    WORKING_DAY_SCORE,
    NON_WORKING_DAY_SCORE,
)
from ..core.weight_config import PreferredTimes


def calculate_time_of_day_score(slot_start: datetime, preferred_times: PreferredTimes) -> float:
    """
    Score the slot's start hour against the teacher's day periods:
    morning [6, 12), day [12, 18), evening [18, 23).

    An enabled period containing the hour scores its configured weight.
    Disabled periods and hours outside every period score neutral (0.5).
    """
    hour = slot_start.hour

    for name, preference in preferred_times.periods():
        start_hour, end_hour = PERIOD_HOURS[name]
        if preference.enabled and start_hour <= hour < end_hour:
            return preference.weight

    return NEUTRAL_SCORE


def sunday_based_weekday(value: datetime) -> int:
    """Weekday numbered 0=Sunday .. 6=Saturday."""
    return value.isoweekday() % 7


def calculate_working_day_score(slot_start: datetime, working_days: Iterable[int]) -> float:
    """
    Non-working days are penalized, not rejected: teachers sometimes take exceptions.
    """
    if sunday_based_weekday(slot_start) in set(working_days):
        return WORKING_DAY_SCORE
    return NON_WORKING_DAY_SCORE
