"""
Conflict resolution workflow: turn a chosen slot into a lesson, or replace
the planned lesson it collides with.

Every mutation re-checks conflicts at commit time while holding the
teacher's lock, so two requests can never both pass the check and insert
overlapping lessons.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from ..config import DEFAULT_LESSON_TYPE
from ..exceptions import BadRequestError, ConflictError, NotFoundError, SchedulingError
from ..models import Lesson, LessonStatus, User
from ..scheduling import CandidateSlot, find_conflicts
from .slot_ranking import get_client_for_teacher, load_planned_lessons, require_teacher

logger = logging.getLogger(__name__)


class TeacherLockRegistry:
    """In-process mutex per teacher id."""

    def __init__(self):
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, teacher_id: int) -> threading.Lock:
        with self._guard:
            if teacher_id not in self._locks:
                self._locks[teacher_id] = threading.Lock()
            return self._locks[teacher_id]


teacher_locks = TeacherLockRegistry()


@contextmanager
def teacher_transaction(db: Session, teacher_id: int):
    """
    Serialize mutations for one teacher and run them as a single transaction.

    Holds the process-level lock and a row lock on the teacher (FOR UPDATE,
    honoured by PostgreSQL). Commits on success, rolls everything back on any
    error.
    """
    with teacher_locks.get(teacher_id):
        try:
            db.query(User).filter(User.id == teacher_id).with_for_update().first()
            yield
            db.commit()
        except SchedulingError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Transaction for teacher {teacher_id} rolled back: {e}")
            raise


def resolve_duration(slot: CandidateSlot, duration_min: Optional[int]) -> int:
    duration = duration_min if duration_min is not None else slot.duration_minutes()
    if duration < 1:
        raise BadRequestError("durationMin must be at least 1")
    return duration


def _validate_slot(slot: Optional[CandidateSlot]) -> CandidateSlot:
    if slot is None:
        raise BadRequestError("selectedSlot with from and to is required")
    if not slot.is_valid():
        raise BadRequestError("selectedSlot: 'to' must be after 'from'")
    return slot


def load_lesson(db: Session, lesson_id: int) -> Lesson:
    return (
        db.query(Lesson)
        .options(joinedload(Lesson.client))
        .filter(Lesson.id == lesson_id)
        .one()
    )


def insert_planned_lesson(
    db: Session,
    teacher_id: int,
    client_id: int,
    start: datetime,
    duration: int,
    lesson_type: Optional[str] = None,
    notes: Optional[str] = None,
    conflict_detail: str = "This time is taken by another client",
) -> Lesson:
    """
    Re-check conflicts and stage a PLANNED lesson. Must run inside
    ``teacher_transaction`` so nothing can slip in between check and insert.
    """
    end = start + timedelta(minutes=duration)
    conflicts = find_conflicts(start, end, load_planned_lessons(db, teacher_id))
    if conflicts:
        logger.info(f"⛔ Slot {start.isoformat()} for teacher {teacher_id} is taken by lesson {conflicts[0].id}")
        raise ConflictError(conflict_detail, conflicting_lesson=conflicts[0])

    lesson = Lesson(
        user_id=teacher_id,
        client_id=client_id,
        start_time=start,
        duration_min=duration,
        type=lesson_type or DEFAULT_LESSON_TYPE,
        status=LessonStatus.PLANNED,
        notes=notes,
    )
    db.add(lesson)
    return lesson


def create_from_slot(
    db: Session,
    teacher_id: Optional[int],
    client_id: Optional[int],
    slot: Optional[CandidateSlot],
    duration_min: Optional[int] = None,
    lesson_type: Optional[str] = None,
    notes: Optional[str] = None,
) -> Lesson:
    """
    Book a PLANNED lesson at the slot's start.

    Raises ConflictError if a planned lesson now overlaps the interval; the
    caller should re-rank or confirm a replacement.
    """
    teacher_id = require_teacher(teacher_id)
    slot = _validate_slot(slot)
    client = get_client_for_teacher(db, teacher_id, client_id)
    duration = resolve_duration(slot, duration_min)

    with teacher_transaction(db, teacher_id):
        lesson = insert_planned_lesson(db, teacher_id, client.id, slot.start, duration, lesson_type, notes)

    db.refresh(lesson)
    logger.info(f"✅ Lesson {lesson.id} created from selected slot for teacher {teacher_id}")
    return load_lesson(db, lesson.id)


def replace_conflicting(
    db: Session,
    teacher_id: Optional[int],
    conflicting_lesson_id: Optional[int],
    client_id: Optional[int],
    slot: Optional[CandidateSlot],
    duration_min: Optional[int] = None,
    lesson_type: Optional[str] = None,
    notes: Optional[str] = None,
) -> Tuple[Lesson, Lesson]:
    """
    Cancel the conflicting lesson and book the slot in its place, atomically.

    Returns (cancelled_lesson, new_lesson). If the new interval still overlaps
    some other planned lesson, raises ConflictError and the cancellation is
    rolled back.
    """
    teacher_id = require_teacher(teacher_id)
    if conflicting_lesson_id is None:
        raise BadRequestError("conflictingLessonId is required")
    slot = _validate_slot(slot)

    existing = (
        db.query(Lesson)
        .filter(Lesson.id == conflicting_lesson_id, Lesson.user_id == teacher_id)
        .first()
    )
    if not existing:
        raise NotFoundError("Conflicting lesson not found")

    client = get_client_for_teacher(db, teacher_id, client_id)
    duration = resolve_duration(slot, duration_min)

    logger.info(f"🔄 Replacing lesson {conflicting_lesson_id} for teacher {teacher_id} with client {client.id}")

    with teacher_transaction(db, teacher_id):
        db.refresh(existing)
        if existing.status != LessonStatus.PLANNED:
            raise ConflictError(
                f"Lesson {existing.id} is no longer planned; rank the slots again",
                can_replace=False,
            )

        existing.status = LessonStatus.CANCELLED
        db.flush()

        lesson = insert_planned_lesson(
            db, teacher_id, client.id, slot.start, duration, lesson_type, notes,
            conflict_detail="This time still overlaps another planned lesson",
        )

    db.refresh(lesson)
    logger.info(f"✅ Lesson {existing.id} cancelled and replaced by {lesson.id}")
    return load_lesson(db, existing.id), load_lesson(db, lesson.id)
