"""Student surface under /api/students: profile, mentor browsing, bookings, feedback."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.dependencies import get_current_student, get_current_user, get_db_session, require_admin
from domain.mentoring.types import FeedbackSide
from models.student import Student
from models.user import User
from services import mentor_service, session_service, student_service
from services.serializers import student_dict

from .sessions import FeedbackBody, SessionStatusValue

router = APIRouter(prefix="/students", tags=["students"])


class StudentProfileBody(BaseModel):
    school: Optional[Dict[str, Any]] = None
    education: Optional[Dict[str, Any]] = None
    interests: Optional[List[str]] = None
    career_goals: Optional[List[str]] = None
    emergency_contact: Optional[Dict[str, Any]] = None


class BookSessionBody(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    mentor_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    scheduled_date: datetime
    duration: int = Field(..., ge=30, le=180)
    session_type: Literal["video_call", "chat", "email", "phone"]
    topics: Optional[List[str]] = None


class CancelBody(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)


@router.get("", summary="All students (admin)")
async def list_students(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await student_service.list_students(session)


@router.get("/profile")
async def get_profile(
    user: User = Depends(get_current_user),
    student: Student = Depends(get_current_student),
):
    return student_dict(student, user)


@router.put("/profile")
async def update_profile(
    body: StudentProfileBody,
    user: User = Depends(get_current_user),
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await student_service.update_profile(
        session, student, user, body.model_dump(exclude_none=True)
    )


@router.get("/mentors", summary="Browse approved mentors")
async def browse_mentors(
    field: Optional[str] = None,
    rating: Optional[float] = Query(None, ge=0, le=5),
    experience: Optional[int] = Query(None, ge=0),
    language: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    student: Student = Depends(get_current_student),
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


@router.get("/mentors/{mentor_id}")
async def mentor_detail(
    mentor_id: str,
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await mentor_service.mentor_detail(session, mentor_id)


@router.post("/sessions", status_code=201, summary="Book a session with a mentor")
async def book_session(
    body: BookSessionBody,
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    booking = await session_service.book_session(
        session,
        settings,
        student,
        mentor_id=body.mentor_id,
        title=body.title,
        description=body.description,
        scheduled_date=body.scheduled_date,
        duration=body.duration,
        session_type=body.session_type,
        topics=body.topics,
    )
    return {
        "message": "Session booked successfully",
        "session": await session_service.session_payload(session, booking),
    }


@router.get("/sessions")
async def my_sessions(
    status: Optional[SessionStatusValue] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await session_service.list_student_sessions(session, student, status, page, limit)


@router.put("/sessions/{session_id}/cancel")
async def cancel_session(
    session_id: str,
    body: Optional[CancelBody] = None,
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await session_service.cancel_by_student(
        session, student, session_id, body.reason if body else None
    )
    return {
        "message": "Session cancelled successfully",
        "session": await session_service.session_payload(session, booking),
    }


@router.post("/sessions/{session_id}/feedback")
async def submit_feedback(
    session_id: str,
    body: FeedbackBody,
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await session_service.submit_feedback(
        session, session_id, FeedbackSide.STUDENT, student.id, body.rating, body.comment
    )
    return {
        "message": "Feedback submitted successfully",
        "session": await session_service.session_payload(session, booking),
    }


@router.get("/stats", summary="Student dashboard counters")
async def stats(
    student: Student = Depends(get_current_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await student_service.dashboard_stats(session, student)
