"""Mentor directory (public) and mentor self-service under /api/mentors."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_current_mentor, get_current_user, get_db_session
from domain.mentoring.types import FeedbackSide
from models.mentor import Mentor
from models.user import User
from services import mentor_service, session_service
from services.serializers import mentor_dict

from .sessions import FeedbackBody, SessionStatusValue

router = APIRouter(prefix="/mentors", tags=["mentors"])


class ExpertiseItem(BaseModel):
    field: str = Field(..., min_length=1)
    sub_fields: List[str] = Field(default_factory=list)
    years_of_experience: int = Field(default=0, ge=0)


class MentorProfileBody(BaseModel):
    designation: Optional[str] = Field(default=None, min_length=1, max_length=200)
    organization: Optional[str] = Field(default=None, min_length=1, max_length=200)
    experience: Optional[int] = Field(default=None, ge=0)
    bio: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    expertise: Optional[List[ExpertiseItem]] = None
    languages: Optional[List[str]] = None
    achievements: Optional[List[Dict[str, Any]]] = None


class TimeSlot(BaseModel):
    start_time: str
    end_time: str
    is_available: bool = True


class DaySchedule(BaseModel):
    day: Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    slots: List[TimeSlot] = Field(default_factory=list)


class AvailabilityBody(BaseModel):
    schedule: Optional[List[DaySchedule]] = None
    timezone: Optional[str] = None


class StatusBody(BaseModel):
    status: Literal["confirmed", "in-progress", "completed", "cancelled", "no-show"]
    notes: Optional[str] = Field(default=None, max_length=2000)


@router.get("", summary="Public mentor directory")
async def directory(
    field: Optional[str] = None,
    rating: Optional[float] = Query(None, ge=0, le=5),
    experience: Optional[int] = Query(None, ge=0),
    language: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: AsyncSession = Depends(get_db_session),
):
    return await mentor_service.directory(
        session,
        field=field,
        rating=rating,
        experience=experience,
        language=language,
        page=page,
        limit=limit,
    )


@router.get("/profile")
async def get_profile(
    user: User = Depends(get_current_user),
    mentor: Mentor = Depends(get_current_mentor),
):
    return mentor_dict(mentor, user)


@router.put("/profile")
async def update_profile(
    body: MentorProfileBody,
    user: User = Depends(get_current_user),
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    return await mentor_service.update_profile(
        session, mentor, user, body.model_dump(exclude_none=True)
    )


@router.put("/availability")
async def update_availability(
    body: AvailabilityBody,
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    schedule = [d.model_dump() for d in body.schedule] if body.schedule is not None else None
    return await mentor_service.update_availability(session, mentor, schedule, body.timezone)


@router.get("/sessions")
async def my_sessions(
    status: Optional[SessionStatusValue] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    return await session_service.list_mentor_sessions(session, mentor, status, page, limit)


@router.get("/sessions/upcoming")
async def upcoming_sessions(
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    return await session_service.mentor_upcoming(session, mentor)


@router.get("/sessions/recent")
async def recent_sessions(
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    return await session_service.mentor_recent(session, mentor)


@router.put("/sessions/{session_id}/status", summary="Advance a session through its life cycle")
async def update_status(
    session_id: str,
    body: StatusBody,
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await session_service.mentor_update_status(
        session, mentor, session_id, body.status, body.notes
    )
    return {
        "message": "Session status updated successfully",
        "session": await session_service.session_payload(session, booking),
    }


@router.post("/sessions/{session_id}/feedback")
async def submit_feedback(
    session_id: str,
    body: FeedbackBody,
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await session_service.submit_feedback(
        session, session_id, FeedbackSide.MENTOR, mentor.id, body.rating, body.comment
    )
    return {
        "message": "Feedback submitted successfully",
        "session": await session_service.session_payload(session, booking),
    }


@router.get("/stats")
async def stats(
    mentor: Mentor = Depends(get_current_mentor),
    session: AsyncSession = Depends(get_db_session),
):
    return await mentor_service.statistics(session, mentor)
