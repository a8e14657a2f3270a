from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, UTCDateTime, new_id, utcnow


class Mentor(Base):
    """Mentor profile, 1:1 with a User. Bookable only once approved."""

    __tablename__ = "mentors"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, unique=True, index=True
    )

    # professional info
    designation: Mapped[str] = mapped_column(String(200), nullable=False)
    organization: Mapped[str] = mapped_column(String(200), nullable=False)
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    education: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    certifications: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    expertise: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    bio: Mapped[str] = mapped_column(Text, nullable=False)
    languages: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    availability_schedule: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    availability_timezone: Mapped[str] = mapped_column(
        String(64), nullable=False, default="Asia/Kolkata"
    )

    verification_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="pending", index=True
    )
    verification_documents: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    verified_by: Mapped[Optional[str]] = mapped_column(ForeignKey("users.id"), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    reviews: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    rating_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rating_total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    achievements: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    badges: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    students_mentored: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completion_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    preferences: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("ix_mentor_directory", "verification_status", "is_active", "rating_average"),
    )
