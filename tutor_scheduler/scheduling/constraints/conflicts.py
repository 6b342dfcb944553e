"""
Interval overlap checks between candidate slots and planned lessons.
"""

import logging
from datetime import datetime
from typing import Iterable, List
from ..core.time_slot import LessonInterval

logger = logging.getLogger(__name__)


def intervals_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    """
    Half-open [start, end) overlap. Touching boundaries do not overlap.
    """
    return start1 < end2 and start2 < end1


def find_conflicts(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_lessons: Iterable[LessonInterval],
) -> List[LessonInterval]:
    """
    Return every PLANNED lesson whose interval overlaps the candidate.
    DONE and CANCELLED lessons never conflict.
    """
    conflicts = [
        lesson for lesson in existing_lessons
        if lesson.is_planned and intervals_overlap(candidate_start, candidate_end, lesson.start, lesson.end)
    ]

    if len(conflicts) > 1:
        # Planned lessons are never supposed to overlap each other
        logger.warning(
            f"⚠️ Slot {candidate_start.isoformat()} - {candidate_end.isoformat()} overlaps "
            f"{len(conflicts)} planned lessons {[lesson.id for lesson in conflicts]}; stored lessons overlap"
        )

    return conflicts
