from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UTCDateTime, as_utc, new_id, utcnow


def default_feedback() -> Dict[str, Any]:
    return {"student": None, "mentor": None}


def default_notes() -> Dict[str, Any]:
    return {"student": None, "mentor": None, "admin": None}


class MentoringSession(Base):
    """One scheduled engagement between a Student and a Mentor."""

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.id"), nullable=False)
    mentor_id: Mapped[str] = mapped_column(ForeignKey("mentors.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    scheduled_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)  # minutes
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="scheduled")
    session_type: Mapped[str] = mapped_column(String(16), nullable=False, default="video_call")

    meeting_link: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    meeting_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    topics: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=default_notes)
    feedback: Mapped[Dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=default_feedback
    )
    reminders: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    cancellation: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    actual_start_time: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    actual_end_time: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    actual_duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # minutes
    recording_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    chat_history: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    attachments: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    follow_up: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("ix_session_student_date", "student_id", "scheduled_date"),
        Index("ix_session_mentor_date", "mentor_id", "scheduled_date"),
        Index("ix_session_status_date", "status", "scheduled_date"),
    )

    @property
    def duration_hours(self) -> float:
        return (self.duration or 0) / 60

    @property
    def actual_duration_hours(self) -> float:
        return self.actual_duration / 60 if self.actual_duration else 0.0

    def is_upcoming(self, now: Optional[datetime] = None) -> bool:
        now = as_utc(now) if now else utcnow()
        return self.scheduled_date > now and self.status == "scheduled"

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        now = as_utc(now) if now else utcnow()
        return self.scheduled_date < now and self.status == "scheduled"
