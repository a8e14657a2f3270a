from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UTCDateTime, new_id, utcnow


def default_progress() -> Dict[str, Any]:
    return {"total_sessions": 0, "total_hours": 0.0, "badges": [], "points": 0}


def default_quiz_results() -> Dict[str, Any]:
    return {"completed": False, "recommended_careers": [], "completed_at": None}


class Student(Base):
    """Student profile, 1:1 with a User."""

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, unique=True, index=True
    )

    school: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    education: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    interests: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    career_goals: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    quiz_results: Mapped[Dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=default_quiz_results
    )
    preferences: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    achievements: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    scholarships: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    progress: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=default_progress)
    emergency_contact: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow
    )
