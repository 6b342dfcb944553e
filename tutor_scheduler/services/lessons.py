"""
Read access to a teacher's lessons and the status changes that only ever
free up time (a lesson being done or cancelled).
"""

import logging
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from ..exceptions import BadRequestError, NotFoundError
from ..models import Lesson, LessonStatus

logger = logging.getLogger(__name__)


def list_lessons(db: Session, teacher_id: int, status: Optional[LessonStatus] = None) -> List[Lesson]:
    query = (
        db.query(Lesson)
        .options(joinedload(Lesson.client))
        .filter(Lesson.user_id == teacher_id)
    )
    if status is not None:
        query = query.filter(Lesson.status == status)
    return query.order_by(Lesson.start_time.asc()).all()


def lesson_stats(db: Session, teacher_id: int) -> dict:
    rows = (
        db.query(Lesson.status, func.count(Lesson.id))
        .filter(Lesson.user_id == teacher_id)
        .group_by(Lesson.status)
        .all()
    )
    counts = {status: count for status, count in rows}
    planned = counts.get(LessonStatus.PLANNED, 0)
    done = counts.get(LessonStatus.DONE, 0)
    cancelled = counts.get(LessonStatus.CANCELLED, 0)
    return {"planned": planned, "done": done, "cancelled": cancelled, "total": planned + done + cancelled}


def set_lesson_status(db: Session, teacher_id: int, lesson_id: int, status: LessonStatus) -> Lesson:
    """
    Mark a planned lesson DONE or CANCELLED. Going back to PLANNED is not
    allowed here since it would bypass the conflict check; book a new slot
    instead.
    """
    lesson = (
        db.query(Lesson)
        .options(joinedload(Lesson.client))
        .filter(Lesson.id == lesson_id, Lesson.user_id == teacher_id)
        .first()
    )
    if not lesson:
        raise NotFoundError("Lesson not found")

    if status == LessonStatus.PLANNED:
        raise BadRequestError("Lessons cannot be re-planned; book the slot again instead")
    if lesson.status != LessonStatus.PLANNED:
        raise BadRequestError(f"Lesson is already {lesson.status.value}")

    lesson.status = status
    db.commit()
    db.refresh(lesson)
    logger.info(f"📝 Lesson {lesson.id} marked {status.value} by teacher {teacher_id}")
    return lesson
