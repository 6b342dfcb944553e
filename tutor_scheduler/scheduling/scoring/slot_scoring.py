"""
Main slot scoring aggregator that combines all preference scores.
"""

from typing import List, Optional
from ..core.constants import CONFLICT_PENALTY
from ..core.ranked_slot import RankedSlot
from ..core.time_slot import CandidateSlot, LessonInterval
from ..core.weight_config import WeightConfig
from ..constraints.conflicts import find_conflicts

from .time_scoring import calculate_time_of_day_score, calculate_working_day_score
from .gap_scoring import calculate_compact_score
from .priority_scoring import calculate_priority_score


def combine_scores(
    config: WeightConfig,
    time_score: float,
    compact_score: float,
    working_day_score: float,
    priority_score: float,
    has_conflict: bool = False,
) -> float:
    """
    Weighted sum of the four factors.

    gap_importance moves influence from raw compactness to working-day
    adherence: compactness is dampened by (1 - gap_importance * 0.5) while
    working days gain gap_importance * 0.3.
    """
    total_score = (
        (config.w_time * time_score) +
        (config.w_compact * compact_score * (1 - config.gap_importance * 0.5)) +
        (config.w_priority * priority_score) +
        (config.gap_importance * 0.3 * working_day_score)
    )

    if has_conflict:
        total_score *= CONFLICT_PENALTY

    return total_score


def generate_explanation(
    time_score: float,
    compact_score: float,
    working_day_score: float,
    is_vip: bool,
    conflicting_lesson: Optional[LessonInterval] = None,
) -> str:
    """Short human-readable summary of why a slot scored the way it did."""
    if conflicting_lesson is not None:
        client_name = conflicting_lesson.client_name or "another client"
        return f"CONFLICT: slot is taken by client {client_name}"

    reasons = []

    if time_score >= 0.7:
        reasons.append("convenient time")
    elif time_score < 0.5:
        reasons.append("inconvenient time")

    if compact_score >= 0.8:
        reasons.append("optimal gap")
    elif compact_score < 0.5:
        reasons.append("poor gap")

    if working_day_score >= 0.9:
        reasons.append("working day")
    else:
        reasons.append("non-working day")

    if is_vip:
        reasons.append("VIP client")

    return ", ".join(reasons)


def calculate_slot_score(
    slot: CandidateSlot,
    config: WeightConfig,
    lessons: List[LessonInterval],
    is_vip: bool,
) -> RankedSlot:
    """
    Score one candidate slot against the teacher's preferences and planned lessons.
    """
    conflicts = find_conflicts(slot.start, slot.end, lessons)

    time_score = calculate_time_of_day_score(slot.start, config.preferred_times)
    compact_score = calculate_compact_score(
        slot.start, slot.end, lessons, config.min_gap_minutes, config.max_gap_minutes
    )
    working_day_score = calculate_working_day_score(slot.start, config.working_days)
    priority_score = calculate_priority_score(is_vip)

    raw_score = combine_scores(
        config, time_score, compact_score, working_day_score, priority_score,
        has_conflict=bool(conflicts),
    )

    explanation = generate_explanation(
        time_score, compact_score, working_day_score, is_vip,
        conflicts[0] if conflicts else None,
    )

    return RankedSlot(
        slot=slot,
        raw_score=raw_score,
        time_score=time_score,
        compact_score=compact_score,
        working_day_score=working_day_score,
        priority_score=priority_score,
        explanation=explanation,
        conflicts=conflicts,
    )
