from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Body
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import User, LessonStatus
from ..schemas import LessonOut, LessonStats, LessonStatusUpdate
from ..auth import get_current_user
from ..services import lessons as lessons_service

router = APIRouter(tags=["lessons"])


@router.get("/", response_model=List[LessonOut])
def list_lessons(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    status: Optional[LessonStatus] = Query(None),
):
    lessons = lessons_service.list_lessons(db, current_user.id, status)
    return [LessonOut.from_lesson(lesson) for lesson in lessons]


@router.get("/stats", response_model=LessonStats)
def get_lesson_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return lessons_service.lesson_stats(db, current_user.id)


@router.patch("/{lesson_id}/status", response_model=LessonOut)
def update_lesson_status(
    lesson_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    data: LessonStatusUpdate = Body(...),
):
    lesson = lessons_service.set_lesson_status(db, current_user.id, lesson_id, data.status)
    return LessonOut.from_lesson(lesson)
