"""
Slot ranking API: rank proposed slots, book one, or replace a conflicting lesson.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Body, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import User
from ..schemas import (
    SlotProposal,
    RankSlotsRequest,
    SelectSlotRequest,
    ReplaceLessonRequest,
    LessonOut,
    LessonCreatedResponse,
    LessonReplacedResponse,
)
from ..auth import get_current_user
from ..scheduling import CandidateSlot
from ..services import booking, slot_ranking

router = APIRouter(tags=["slot-ranking"])


def to_candidate(proposal: Optional[SlotProposal]) -> Optional[CandidateSlot]:
    if proposal is None:
        return None
    return CandidateSlot(proposal.from_, proposal.to)


@router.post("/rank")
def rank_slots(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    request: RankSlotsRequest = Body(...),
):
    """Rank client-proposed slots against the teacher's preferences, best first"""
    candidates = [to_candidate(proposal) for proposal in request.proposed_slots]
    result = slot_ranking.rank_slots(db, current_user.id, request.client_id, candidates)
    return result.to_dict()


@router.post("/select", response_model=LessonCreatedResponse, status_code=status.HTTP_201_CREATED)
def select_slot(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    request: SelectSlotRequest = Body(...),
):
    """Book the chosen slot; 409 if it now overlaps a planned lesson"""
    lesson = booking.create_from_slot(
        db,
        current_user.id,
        request.client_id,
        to_candidate(request.selected_slot),
        duration_min=request.duration_min,
        lesson_type=request.type,
        notes=request.notes,
    )
    return LessonCreatedResponse(message="Lesson created", lesson=LessonOut.from_lesson(lesson))


@router.post("/replace", response_model=LessonReplacedResponse, status_code=status.HTTP_201_CREATED)
def replace_conflicting_lesson(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    request: ReplaceLessonRequest = Body(...),
):
    """Cancel the conflicting lesson and book the chosen slot in one transaction"""
    cancelled, lesson = booking.replace_conflicting(
        db,
        current_user.id,
        request.conflicting_lesson_id,
        request.client_id,
        to_candidate(request.selected_slot),
        duration_min=request.duration_min,
        lesson_type=request.type,
        notes=request.notes,
    )
    return LessonReplacedResponse(
        message="Lesson replaced",
        cancelled_lesson_id=cancelled.id,
        lesson=LessonOut.from_lesson(lesson),
    )
