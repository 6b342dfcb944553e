"""
Slot requests API: store a client's proposed windows, rank them, and accept
or reject them.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Body, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import SlotRequest, User
from ..schemas import (
    SlotRequestCreate,
    SlotRequestUpdate,
    SlotRequestOut,
    AcceptSlotRequest,
    RejectSlotRequest,
    LessonOut,
    SlotAcceptedResponse,
)
from ..auth import get_current_user
from ..services import slot_requests as requests_service
from .slot_ranking import to_candidate

router = APIRouter(tags=["slot-requests"])


def to_out(slot_request: SlotRequest) -> SlotRequestOut:
    return SlotRequestOut.from_request(slot_request, requests_service.stored_slots(slot_request))


@router.get("/", response_model=List[SlotRequestOut])
def list_slot_requests(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Open (NEW or PENDING) requests of the caller's clients, newest first"""
    return [to_out(r) for r in requests_service.list_active_requests(db, current_user.id)]


@router.post("/", response_model=SlotRequestOut, status_code=status.HTTP_201_CREATED)
def create_slot_request(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    data: SlotRequestCreate = Body(...),
):
    slot_request = requests_service.create_request(
        db,
        current_user.id,
        data.client_id,
        [to_candidate(proposal) for proposal in data.proposed_slots],
        data.status,
    )
    return to_out(slot_request)


@router.get("/{request_id}", response_model=SlotRequestOut)
def get_slot_request(request_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return to_out(requests_service.get_request(db, current_user.id, request_id))


@router.put("/{request_id}", response_model=SlotRequestOut)
def update_slot_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    data: SlotRequestUpdate = Body(...),
):
    proposed = None
    if data.proposed_slots is not None:
        proposed = [to_candidate(proposal) for proposal in data.proposed_slots]
    slot_request = requests_service.update_request(
        db, current_user.id, request_id, client_id=data.client_id, proposed_slots=proposed, status=data.status
    )
    return to_out(slot_request)


@router.delete("/{request_id}")
def delete_slot_request(request_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    requests_service.delete_request(db, current_user.id, request_id)
    return {"success": True, "message": "Slot request deleted"}


@router.post("/{request_id}/rank")
def rank_slot_request(request_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Rank the request's stored slots against the caller's preferences"""
    return requests_service.rank_request(db, current_user.id, request_id).to_dict()


@router.post("/{request_id}/accept", response_model=SlotAcceptedResponse, status_code=status.HTTP_201_CREATED)
def accept_slot_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    data: AcceptSlotRequest = Body(...),
):
    """Book one of the proposed slots; 409 if it now overlaps a planned lesson"""
    slot_request, lesson = requests_service.accept_slot(
        db,
        current_user.id,
        request_id,
        data.slot_index,
        duration_min=data.duration_min,
        lesson_type=data.type,
        notes=data.notes,
    )
    return SlotAcceptedResponse(
        message="Slot accepted",
        lesson=LessonOut.from_lesson(lesson),
        slot_request=to_out(slot_request),
    )


@router.post("/{request_id}/reject", response_model=SlotRequestOut)
def reject_slot_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    data: Optional[RejectSlotRequest] = Body(None),
):
    """Drop one proposed slot, or the whole request without slotIndex"""
    slot_index = data.slot_index if data else None
    return to_out(requests_service.reject_slot(db, current_user.id, request_id, slot_index))
