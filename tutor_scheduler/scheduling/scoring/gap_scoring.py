"""
Compactness scoring: how well a slot's spacing to existing lessons matches
the teacher's desired gap range.
"""

from datetime import datetime
from typing import Iterable
from ..core.constants import NEUTRAL_SCORE
from ..core.time_slot import LessonInterval


def calculate_gap_score(gap_minutes: float, min_gap: int, max_gap: int) -> float:
    """
    Map a gap in minutes to a score:
    - below min_gap: rises linearly from 0.2 (back-to-back) to 0.5
    - within [min_gap, max_gap]: 1.0
    - above max_gap: decays linearly from 0.8 over 2 * max_gap, floor 0.3
    """
    if gap_minutes < min_gap:
        # Too close
        return 0.2 + (gap_minutes / min_gap) * 0.3
    elif gap_minutes <= max_gap:
        # Ideal spacing
        return 1.0
    else:
        # Too sparse
        excess_gap = gap_minutes - max_gap
        return max(0.3, 0.8 - (excess_gap / (max_gap * 2)) * 0.5)


def calculate_compact_score(
    slot_start: datetime,
    slot_end: datetime,
    lessons: Iterable[LessonInterval],
    min_gap: int,
    max_gap: int,
) -> float:
    """
    Best gap score over all planned lessons. For each lesson the gap is the
    smaller of the distances on either side of the slot. No lessons -> 0.5.
    """
    planned = [lesson for lesson in lessons if lesson.is_planned]
    if not planned:
        return NEUTRAL_SCORE

    best_score = 0.0
    for lesson in planned:
        gap_before = abs((slot_start - lesson.end).total_seconds() / 60)
        gap_after = abs((lesson.start - slot_end).total_seconds() / 60)
        gap = min(gap_before, gap_after)
        best_score = max(best_score, calculate_gap_score(gap, min_gap, max_gap))

    return best_score
