"""Session reads, admin updates, role-dispatched feedback and per-session chat."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_current_user, get_db_session, require_admin
from models.user import User
from services import session_service

router = APIRouter(prefix="/sessions", tags=["sessions"])

SessionStatusValue = Literal["scheduled", "confirmed", "in-progress", "completed", "cancelled", "no-show"]


class FeedbackBody(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)


class AdminSessionUpdateBody(BaseModel):
    status: Optional[SessionStatusValue] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class ChatBody(BaseModel):
    message: Optional[str] = None


@router.get("/info", summary="Session API description")
async def session_info():
    return {
        "message": "Session Management API",
        "description": "Book and manage mentorship sessions with verified mentors.",
    }


@router.get("")
async def list_sessions(
    status: Optional[SessionStatusValue] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await session_service.list_all_sessions(session, status, page, limit)


@router.get("/{session_id}")
async def get_session(
    session_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await session_service.get_session_for(session, user, session_id)
    return await session_service.session_payload(session, booking)


@router.put("/{session_id}")
async def admin_update_session(
    session_id: str,
    body: AdminSessionUpdateBody,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await session_service.admin_update_session(
        session, session_id, status=body.status, notes=body.notes
    )
    return {
        "message": "Session updated successfully",
        "session": await session_service.session_payload(session, booking),
    }


@router.post("/{session_id}/feedback")
async def submit_feedback(
    session_id: str,
    body: FeedbackBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    booking = await session_service.submit_feedback_as(
        session, user, session_id, body.rating, body.comment
    )
    return {
        "message": "Feedback submitted successfully",
        "session": await session_service.session_payload(session, booking),
    }


@router.get("/{session_id}/chat")
async def get_chat(
    session_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return {"chat_history": await session_service.get_chat(session, user, session_id)}


@router.post("/{session_id}/chat")
async def post_chat(
    session_id: str,
    body: ChatBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    entry = await session_service.post_chat(session, user, session_id, body.message)
    return {"message": "Message sent", "chat": entry}
