from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List
from .models import LessonStatus, SlotRequestStatus
from .scheduling.core.constants import PREFERENCE_WEIGHT_MIN, PREFERENCE_WEIGHT_MAX

# ----------------- Base -----------------------------


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, also accepts snake_case on input."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel

# ----------------- Slot Ranking Schemas -------------


class SlotProposal(CamelModel):
    from_: datetime = Field(..., alias="from")
    to: datetime


class RankSlotsRequest(CamelModel):
    client_id: Optional[int] = None
    proposed_slots: List[SlotProposal] = []


class SelectSlotRequest(CamelModel):
    client_id: Optional[int] = None
    selected_slot: Optional[SlotProposal] = None
    duration_min: Optional[int] = Field(None, ge=1)
    type: Optional[str] = None
    notes: Optional[str] = None


class ReplaceLessonRequest(SelectSlotRequest):
    conflicting_lesson_id: Optional[int] = None

# ----------------- Slot Request Schemas ------------


class SlotRequestCreate(CamelModel):
    client_id: Optional[int] = None
    proposed_slots: List[SlotProposal] = []
    status: Optional[SlotRequestStatus] = None


class SlotRequestUpdate(CamelModel):
    client_id: Optional[int] = None
    proposed_slots: Optional[List[SlotProposal]] = None
    status: Optional[SlotRequestStatus] = None


class SlotRequestOut(CamelModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    client_vip: bool = False
    proposed_slots: List[SlotProposal]
    status: SlotRequestStatus
    created_at: Optional[datetime] = None

    @classmethod
    def from_request(cls, slot_request, slots) -> "SlotRequestOut":
        client = slot_request.client
        return cls(
            id=slot_request.id,
            client_id=slot_request.client_id,
            client_name=client.full_name if client else None,
            client_vip=bool(client.vip) if client else False,
            proposed_slots=[SlotProposal(from_=slot.start, to=slot.end) for slot in slots],
            status=slot_request.status,
            created_at=slot_request.created_at,
        )


class AcceptSlotRequest(CamelModel):
    slot_index: int = Field(..., ge=0)
    duration_min: Optional[int] = Field(None, ge=1)
    type: Optional[str] = None
    notes: Optional[str] = None


class RejectSlotRequest(CamelModel):
    slot_index: Optional[int] = Field(None, ge=0)

# ----------------- Lesson Schemas -------------------


class LessonOut(CamelModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    start_time: datetime
    end_time: datetime
    duration_min: int
    type: Optional[str] = None
    status: LessonStatus
    notes: Optional[str] = None

    @classmethod
    def from_lesson(cls, lesson) -> "LessonOut":
        return cls(
            id=lesson.id,
            client_id=lesson.client_id,
            client_name=lesson.client.full_name if lesson.client else None,
            start_time=lesson.start_time,
            end_time=lesson.end_time,
            duration_min=lesson.duration_min,
            type=lesson.type,
            status=lesson.status,
            notes=lesson.notes,
        )


class LessonCreatedResponse(CamelModel):
    message: str
    lesson: LessonOut


class LessonReplacedResponse(LessonCreatedResponse):
    cancelled_lesson_id: int


class SlotAcceptedResponse(LessonCreatedResponse):
    slot_request: SlotRequestOut


class LessonStatusUpdate(CamelModel):
    status: LessonStatus


class LessonStats(CamelModel):
    planned: int
    done: int
    cancelled: int
    total: int

# ----------------- Slot Weight Schemas --------------


class PeriodPreferenceIn(CamelModel):
    enabled: bool = False
    weight: float = Field(0.5, ge=PREFERENCE_WEIGHT_MIN, le=PREFERENCE_WEIGHT_MAX)


class PreferredTimesIn(CamelModel):
    morning: Optional[PeriodPreferenceIn] = None
    day: Optional[PeriodPreferenceIn] = None
    evening: Optional[PeriodPreferenceIn] = None


class SlotWeightUpdate(CamelModel):
    w_time: Optional[float] = Field(None, ge=0, le=1)
    w_compact: Optional[float] = Field(None, ge=0, le=1)
    w_priority: Optional[float] = Field(None, ge=0, le=1)
    working_days: Optional[List[int]] = None
    preferred_times: Optional[PreferredTimesIn] = None
    min_gap_minutes: Optional[int] = Field(None, ge=0)
    max_gap_minutes: Optional[int] = Field(None, ge=1)
    gap_importance: Optional[float] = Field(None, ge=PREFERENCE_WEIGHT_MIN, le=PREFERENCE_WEIGHT_MAX)

    @field_validator("working_days")
    @classmethod
    def check_working_days(cls, value):
        if value is None:
            return value
        if len(value) == 0:
            raise ValueError("workingDays must be a non-empty list")
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("workingDays must contain numbers from 0 to 6")
        return sorted(set(value))
