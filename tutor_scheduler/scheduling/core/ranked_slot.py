"""
Result of scoring one candidate slot.
"""

from typing import List, Optional
from .time_slot import CandidateSlot, LessonInterval


def round_score(value: float) -> float:
    return round(value, 2)


class RankedSlot:
    """
    A candidate slot with its final score, per-factor breakdown and the
    planned lessons it overlaps. Scores are kept unrounded; ``to_dict`` rounds
    for presentation.
    """
    def __init__(
        self,
        slot: CandidateSlot,
        raw_score: float,
        time_score: float,
        compact_score: float,
        working_day_score: float,
        priority_score: float,
        explanation: str,
        conflicts: Optional[List[LessonInterval]] = None,
    ):
        self.slot = slot
        self.raw_score = raw_score
        self.time_score = time_score
        self.compact_score = compact_score
        self.working_day_score = working_day_score
        self.priority_score = priority_score
        self.explanation = explanation
        self.conflicts = conflicts or []

    @property
    def score(self) -> float:
        return round_score(self.raw_score)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicts)

    @property
    def conflicting_lesson(self) -> Optional[LessonInterval]:
        return self.conflicts[0] if self.conflicts else None

    def to_dict(self) -> dict:
        result = {
            "from": self.slot.start.isoformat(),
            "to": self.slot.end.isoformat(),
            "score": self.score,
            "breakdown": {
                "timeScore": round_score(self.time_score),
                "compactScore": round_score(self.compact_score),
                "workingDayScore": round_score(self.working_day_score),
                "priorityScore": round_score(self.priority_score),
            },
            "explanation": self.explanation,
            "hasConflict": self.has_conflict,
        }
        lesson = self.conflicting_lesson
        if lesson is not None:
            result["conflictingLesson"] = {
                "id": lesson.id,
                "clientName": lesson.client_name,
                "startTime": lesson.start.isoformat(),
            }
        return result

    def __repr__(self):
        flag = " CONFLICT" if self.has_conflict else ""
        return f"RankedSlot({self.slot.start.strftime('%Y-%m-%d %H:%M')}, score={self.score}{flag})"
