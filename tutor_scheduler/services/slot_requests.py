"""
Slot requests: the time windows a client proposed, kept until the teacher
ranks them and accepts or rejects them.

Requests belong to a teacher through their client. Accepting a slot books the
lesson and closes the request in the same locked transaction.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session, joinedload
from ..exceptions import BadRequestError, NotFoundError
from ..models import Client, Lesson, SlotRequest, SlotRequestStatus
from ..scheduling import CandidateSlot
from .booking import insert_planned_lesson, load_lesson, resolve_duration, teacher_transaction
from .slot_ranking import (
    RankingResult,
    get_client_for_teacher,
    rank_slots,
    require_teacher,
    validate_candidate_slots,
)

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (SlotRequestStatus.NEW, SlotRequestStatus.PENDING)


def stored_slots(slot_request: SlotRequest) -> List[CandidateSlot]:
    """Parse the JSON slot list. Older rows store ``start`` + ``duration`` instead of ``from``/``to``."""
    slots = []
    for item in slot_request.proposed_slots or []:
        if "from" in item:
            start = datetime.fromisoformat(item["from"])
            end = datetime.fromisoformat(item["to"])
        else:
            start = datetime.fromisoformat(item["start"])
            end = start + timedelta(minutes=int(item.get("duration", 60)))
        slots.append(CandidateSlot(start, end))
    return slots


def serialize_slots(slots: Sequence[CandidateSlot]) -> List[dict]:
    return [{"from": slot.start.isoformat(), "to": slot.end.isoformat()} for slot in slots]


def _check_open_status(status: Optional[SlotRequestStatus]) -> None:
    # ACCEPTED and REJECTED are only reached through accept_slot / reject_slot
    if status is not None and status not in ACTIVE_STATUSES:
        raise BadRequestError("status can only be NEW or PENDING; use accept or reject to answer a request")


def _load_request(db: Session, teacher_id: int, request_id: int) -> SlotRequest:
    slot_request = (
        db.query(SlotRequest)
        .join(Client, SlotRequest.client_id == Client.id)
        .options(joinedload(SlotRequest.client))
        .filter(SlotRequest.id == request_id, Client.user_id == teacher_id)
        .first()
    )
    if not slot_request:
        raise NotFoundError("Slot request not found")
    return slot_request


def _require_active(slot_request: SlotRequest) -> None:
    if not slot_request.is_active:
        raise BadRequestError(f"Slot request is already {slot_request.status.value.lower()}")


def _pick_slot(slots: List[CandidateSlot], slot_index: int) -> CandidateSlot:
    if slot_index < 0 or slot_index >= len(slots):
        raise BadRequestError(f"slotIndex must be between 0 and {len(slots) - 1}")
    return slots[slot_index]


def list_active_requests(db: Session, teacher_id: Optional[int]) -> List[SlotRequest]:
    """NEW and PENDING requests of the teacher's clients, newest first."""
    teacher_id = require_teacher(teacher_id)
    return (
        db.query(SlotRequest)
        .join(Client, SlotRequest.client_id == Client.id)
        .options(joinedload(SlotRequest.client))
        .filter(Client.user_id == teacher_id, SlotRequest.status.in_(ACTIVE_STATUSES))
        .order_by(SlotRequest.created_at.desc(), SlotRequest.id.desc())
        .all()
    )


def get_request(db: Session, teacher_id: Optional[int], request_id: int) -> SlotRequest:
    return _load_request(db, require_teacher(teacher_id), request_id)


def create_request(
    db: Session,
    teacher_id: Optional[int],
    client_id: Optional[int],
    proposed_slots: Optional[Sequence[CandidateSlot]],
    status: Optional[SlotRequestStatus] = None,
) -> SlotRequest:
    teacher_id = require_teacher(teacher_id)
    slots = validate_candidate_slots(proposed_slots)
    _check_open_status(status)
    client = get_client_for_teacher(db, teacher_id, client_id)

    slot_request = SlotRequest(
        client_id=client.id,
        proposed_slots=serialize_slots(slots),
        status=status or SlotRequestStatus.PENDING,
    )
    db.add(slot_request)
    db.commit()
    logger.info(f"📥 Slot request {slot_request.id} created for client {client.full_name} ({len(slots)} slots)")
    return _load_request(db, teacher_id, slot_request.id)


def update_request(
    db: Session,
    teacher_id: Optional[int],
    request_id: int,
    client_id: Optional[int] = None,
    proposed_slots: Optional[Sequence[CandidateSlot]] = None,
    status: Optional[SlotRequestStatus] = None,
) -> SlotRequest:
    """Partial update; fields left as None keep their stored value."""
    teacher_id = require_teacher(teacher_id)
    slot_request = _load_request(db, teacher_id, request_id)
    _check_open_status(status)

    slots = validate_candidate_slots(proposed_slots) if proposed_slots is not None else None
    client = get_client_for_teacher(db, teacher_id, client_id) if client_id is not None else None

    if slots is not None:
        slot_request.proposed_slots = serialize_slots(slots)
    if client is not None:
        slot_request.client_id = client.id
    if status is not None:
        slot_request.status = status

    db.commit()
    logger.info(f"✅ Slot request {request_id} updated")
    return _load_request(db, teacher_id, request_id)


def delete_request(db: Session, teacher_id: Optional[int], request_id: int) -> None:
    teacher_id = require_teacher(teacher_id)
    slot_request = _load_request(db, teacher_id, request_id)
    db.delete(slot_request)
    db.commit()
    logger.info(f"🗑️ Slot request {request_id} deleted by teacher {teacher_id}")


def rank_request(db: Session, teacher_id: Optional[int], request_id: int) -> RankingResult:
    """Rank the slots stored on a request, exactly as if the client had just proposed them."""
    teacher_id = require_teacher(teacher_id)
    slot_request = _load_request(db, teacher_id, request_id)
    return rank_slots(db, teacher_id, slot_request.client_id, stored_slots(slot_request))


def accept_slot(
    db: Session,
    teacher_id: Optional[int],
    request_id: int,
    slot_index: int,
    duration_min: Optional[int] = None,
    lesson_type: Optional[str] = None,
    notes: Optional[str] = None,
) -> Tuple[SlotRequest, Lesson]:
    """
    Book one of the request's slots and mark the request ACCEPTED.

    A ConflictError leaves the request open so the teacher can replace the
    conflicting lesson or pick another slot.
    """
    teacher_id = require_teacher(teacher_id)
    slot_request = _load_request(db, teacher_id, request_id)
    _require_active(slot_request)
    slot = _pick_slot(stored_slots(slot_request), slot_index)
    duration = resolve_duration(slot, duration_min)

    with teacher_transaction(db, teacher_id):
        lesson = insert_planned_lesson(
            db, teacher_id, slot_request.client_id, slot.start, duration, lesson_type, notes
        )
        slot_request.status = SlotRequestStatus.ACCEPTED

    db.refresh(lesson)
    logger.info(f"✅ Slot {slot_index} of request {request_id} accepted as lesson {lesson.id}")
    return _load_request(db, teacher_id, request_id), load_lesson(db, lesson.id)


def reject_slot(
    db: Session,
    teacher_id: Optional[int],
    request_id: int,
    slot_index: Optional[int] = None,
) -> SlotRequest:
    """
    Drop one proposed slot, or the whole request when no index is given.
    Rejecting the last remaining slot rejects the request.
    """
    teacher_id = require_teacher(teacher_id)
    slot_request = _load_request(db, teacher_id, request_id)
    _require_active(slot_request)

    if slot_index is None:
        slot_request.status = SlotRequestStatus.REJECTED
    else:
        slots = stored_slots(slot_request)
        _pick_slot(slots, slot_index)
        remaining = slots[:slot_index] + slots[slot_index + 1:]
        if remaining:
            slot_request.proposed_slots = serialize_slots(remaining)
        else:
            slot_request.status = SlotRequestStatus.REJECTED

    db.commit()
    logger.info(f"🚫 Slot request {request_id} rejected (slot={slot_index}, status={slot_request.status.value})")
    return _load_request(db, teacher_id, request_id)
