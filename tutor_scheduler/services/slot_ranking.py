"""
Slot ranking service: loads a consistent snapshot for one teacher and runs
the pure ranking engine over the client's proposed slots.
"""

import logging
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session, joinedload
from ..exceptions import BadRequestError, NotFoundError, UnauthenticatedError
from ..models import Client, Lesson, LessonStatus
from ..scheduling import CandidateSlot, LessonInterval, RankedSlot, WeightConfig, rank_candidate_slots
from .slot_weights import load_weight_config

logger = logging.getLogger(__name__)


class RankingResult:
    def __init__(self, ranked_slots: List[RankedSlot], weights: WeightConfig, client_vip: bool):
        self.ranked_slots = ranked_slots
        self.weights = weights
        self.client_vip = client_vip

    def to_dict(self) -> dict:
        return {
            "rankedSlots": [slot.to_dict() for slot in self.ranked_slots],
            "weights": self.weights.to_dict(),
            "clientVip": self.client_vip,
        }


def require_teacher(teacher_id: Optional[int]) -> int:
    if teacher_id is None:
        raise UnauthenticatedError("Not authenticated")
    return teacher_id


def validate_candidate_slots(slots: Optional[Sequence[CandidateSlot]]) -> List[CandidateSlot]:
    if not slots:
        raise BadRequestError("proposedSlots must be a non-empty list")
    for index, slot in enumerate(slots):
        if not slot.is_valid():
            raise BadRequestError(f"Slot {index}: 'to' must be after 'from'")
    return list(slots)


def get_client_for_teacher(db: Session, teacher_id: int, client_id: Optional[int]) -> Client:
    if client_id is None:
        raise BadRequestError("clientId is required")
    client = db.query(Client).filter(Client.id == client_id, Client.user_id == teacher_id).first()
    if not client:
        raise NotFoundError("Client not found or does not belong to you")
    return client


def load_planned_lessons(db: Session, teacher_id: int) -> List[LessonInterval]:
    """Snapshot of the teacher's PLANNED lessons, earliest first."""
    lessons = (
        db.query(Lesson)
        .options(joinedload(Lesson.client))
        .filter(Lesson.user_id == teacher_id, Lesson.status == LessonStatus.PLANNED)
        .order_by(Lesson.start_time.asc())
        .all()
    )
    return [LessonInterval.from_lesson(lesson) for lesson in lessons]


def rank_slots(
    db: Session,
    teacher_id: Optional[int],
    client_id: Optional[int],
    candidate_slots: Optional[Sequence[CandidateSlot]],
) -> RankingResult:
    """
    Rank proposed slots for a client, best first.

    Raises UnauthenticatedError without a teacher, BadRequestError for an
    empty or malformed slot list or a missing client id, NotFoundError if the
    client is not the teacher's. All checks run before the weights row is
    lazily created.
    """
    teacher_id = require_teacher(teacher_id)
    slots = validate_candidate_slots(candidate_slots)
    client = get_client_for_teacher(db, teacher_id, client_id)

    config = load_weight_config(db, teacher_id)
    lessons = load_planned_lessons(db, teacher_id)

    logger.info(
        f"🔍 Ranking {len(slots)} slots for teacher {teacher_id}, client {client.id} "
        f"(vip={client.vip}) against {len(lessons)} planned lessons"
    )

    ranked = rank_candidate_slots(slots, config, lessons, bool(client.vip))

    logger.info(
        f"✅ Ranking done: {[(r.slot.start.isoformat(), r.score, r.has_conflict) for r in ranked]}"
    )
    return RankingResult(ranked, config, bool(client.vip))
