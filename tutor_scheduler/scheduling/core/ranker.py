"""
Pure ranking over a consistent snapshot of preferences and lessons.
"""

import logging
from typing import List, Sequence
from .ranked_slot import RankedSlot
from .time_slot import CandidateSlot, LessonInterval
from .weight_config import WeightConfig
from ..scoring.slot_scoring import calculate_slot_score

logger = logging.getLogger(__name__)


def rank_candidate_slots(
    slots: Sequence[CandidateSlot],
    config: WeightConfig,
    lessons: List[LessonInterval],
    is_vip: bool,
) -> List[RankedSlot]:
    """
    Score every slot and order them best first.

    Ordering uses the presentation score (rounded to 2 decimals), so slots
    that round to the same value keep their input order. ``sorted`` is stable.
    """
    ranked = []
    for slot in slots:
        ranked_slot = calculate_slot_score(slot, config, lessons, is_vip)
        logger.debug(
            f"🎯 {slot!r}: time={ranked_slot.time_score:.2f} compact={ranked_slot.compact_score:.2f} "
            f"day={ranked_slot.working_day_score:.2f} priority={ranked_slot.priority_score:.2f} "
            f"-> {ranked_slot.raw_score:.4f}"
        )
        ranked.append(ranked_slot)

    return sorted(ranked, key=lambda r: r.score, reverse=True)
