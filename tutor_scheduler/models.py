from sqlalchemy import (
    String, Integer, Boolean, Enum, ForeignKey, DateTime, Float, JSON
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, timedelta
from typing import Optional
from .database import Base
from .scheduling.core.constants import LessonStatus
import enum

# Enums

class UserRole(str, enum.Enum):
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"

class SlotRequestStatus(str, enum.Enum):
    NEW = "NEW"
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

# Models

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String, unique=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.TEACHER)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    clients = relationship("Client", back_populates="owner")
    lessons = relationship("Lesson", back_populates="teacher")
    slot_weight = relationship("SlotWeight", back_populates="user", uselist=False)


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    full_name: Mapped[str] = mapped_column(String, index=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    vip: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    owner = relationship("User", back_populates="clients")
    lessons = relationship("Lesson", back_populates="client")
    slot_requests = relationship("SlotRequest", back_populates="client", cascade="all, delete-orphan")


class Lesson(Base):
    __tablename__ = "lessons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), index=True)

    start_time: Mapped[datetime] = mapped_column(DateTime, index=True)
    duration_min: Mapped[int] = mapped_column(Integer, default=60)
    type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[LessonStatus] = mapped_column(Enum(LessonStatus), default=LessonStatus.PLANNED, index=True)
    notes: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    teacher = relationship("User", back_populates="lessons")
    client = relationship("Client", back_populates="lessons")

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(minutes=self.duration_min)


class SlotWeight(Base):
    """Per-teacher ranking preferences. One row per teacher, created lazily."""
    __tablename__ = "slot_weights"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    user = relationship("User", back_populates="slot_weight")

    w_time: Mapped[float] = mapped_column(Float, default=0.33)
    w_compact: Mapped[float] = mapped_column(Float, default=0.33)
    w_priority: Mapped[float] = mapped_column(Float, default=0.34)

    working_days: Mapped[list[int]] = mapped_column(JSON, default=list)  # 0=Sunday .. 6=Saturday
    preferred_times: Mapped[dict] = mapped_column(JSON, default=dict)    # {"morning": {"enabled":..,"weight":..}, ...}

    min_gap_minutes: Mapped[int] = mapped_column(Integer, default=60)
    max_gap_minutes: Mapped[int] = mapped_column(Integer, default=180)
    gap_importance: Mapped[float] = mapped_column(Float, default=0.5)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SlotRequest(Base):
    """Time windows a client proposed, waiting for the teacher to rank and answer."""
    __tablename__ = "slot_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id"), index=True)

    proposed_slots: Mapped[list] = mapped_column(JSON, default=list)  # [{"from": iso, "to": iso}, ...]
    status: Mapped[SlotRequestStatus] = mapped_column(
        Enum(SlotRequestStatus), default=SlotRequestStatus.PENDING, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Client", back_populates="slot_requests")

    @property
    def is_active(self) -> bool:
        return self.status in (SlotRequestStatus.NEW, SlotRequestStatus.PENDING)
