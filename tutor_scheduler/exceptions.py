"""
Error taxonomy for the scheduling core.

Services raise these; the API layer renders them through a single exception
handler registered in ``main.py``.
"""

from typing import Any, Optional


class SchedulingError(Exception):
    """Base error carrying the HTTP status the API layer should answer with."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"detail": self.detail}


class UnauthenticatedError(SchedulingError):
    status_code = 401


class BadRequestError(SchedulingError):
    status_code = 400


class NotFoundError(SchedulingError):
    status_code = 404


class ConflictError(SchedulingError):
    """The requested interval overlaps an already planned lesson."""

    status_code = 409

    def __init__(self, detail: str, conflicting_lesson: Optional[Any] = None, can_replace: bool = True):
        super().__init__(detail)
        self.conflicting_lesson = conflicting_lesson
        self.can_replace = can_replace

    def to_dict(self) -> dict:
        body = {"detail": self.detail, "canReplace": self.can_replace}
        lesson = self.conflicting_lesson
        if lesson is not None:
            body["conflictingLesson"] = {
                "id": lesson.id,
                "clientName": lesson.client_name,
                "startTime": lesson.start.isoformat(),
            }
        return body
