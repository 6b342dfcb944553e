"""
Time interval representations for the slot ranking engine.
"""

from datetime import datetime, timedelta
from typing import Optional
from .constants import LessonStatus


def to_wall_clock(value: datetime) -> datetime:
    """
    Drop timezone info and keep the wall-clock reading as given.
    Scoring works on local hours and weekdays, no conversion is done.
    """
    if value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


class CandidateSlot:
    """
    A time window proposed by a client for one ranking request.
    """
    def __init__(self, start: datetime, end: datetime):
        self.start = to_wall_clock(start)
        self.end = to_wall_clock(end)

    def is_valid(self) -> bool:
        return self.end > self.start

    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_minutes(self) -> int:
        return round(self.duration().total_seconds() / 60)

    def __repr__(self):
        return f"CandidateSlot({self.start.isoformat()} - {self.end.isoformat()})"


class LessonInterval:
    """
    Read-only snapshot of a stored lesson used for conflict checks and gap scoring.
    """
    def __init__(
        self,
        id: Optional[int],
        client_id: Optional[int],
        client_name: Optional[str],
        start: datetime,
        duration_minutes: int,
        status: LessonStatus = LessonStatus.PLANNED,
    ):
        if duration_minutes < 1:
            raise ValueError("duration_minutes must be at least 1")
        self.id = id
        self.client_id = client_id
        self.client_name = client_name
        self.start = to_wall_clock(start)
        self.duration_minutes = duration_minutes
        self.status = status

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)

    @property
    def is_planned(self) -> bool:
        return self.status == LessonStatus.PLANNED

    @classmethod
    def from_lesson(cls, lesson) -> "LessonInterval":
        """Build a snapshot from a ``Lesson`` ORM row."""
        client_name = lesson.client.full_name if lesson.client is not None else None
        return cls(
            id=lesson.id,
            client_id=lesson.client_id,
            client_name=client_name,
            start=lesson.start_time,
            duration_minutes=lesson.duration_min,
            status=lesson.status,
        )

    def __repr__(self):
        return (
            f"LessonInterval(id={self.id}, {self.start.strftime('%Y-%m-%d %H:%M')} - "
            f"{self.end.strftime('%H:%M')}, {self.client_name}, {self.status.value})"
        )
