"""Admin moderation under /api/admin. Every route requires the admin role."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_db_session, require_admin
from models.user import User
from services import admin_service, session_service

router = APIRouter(prefix="/admin", tags=["admin"])

RoleValue = Literal["student", "mentor", "admin"]
UserStatusValue = Literal["active", "suspended", "banned"]


class VerificationBody(BaseModel):
    mentor_id: str = Field(..., min_length=1)
    reason: Optional[str] = Field(default=None, max_length=1000)


class UserStatusBody(BaseModel):
    status: UserStatusValue


@router.get("/pending-mentors")
async def pending_mentors(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await admin_service.pending_mentors(session, page, limit)


@router.get("/users")
async def list_users(
    role: Optional[RoleValue] = None,
    status: Optional[UserStatusValue] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await admin_service.list_users(
        session, role=role, status=status, search=search, page=page, limit=limit
    )


@router.get("/sessions")
async def list_sessions(
    status: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await session_service.list_all_sessions(session, status, page, limit)


@router.post("/mentors/{action}")
async def verify_mentor(
    action: Literal["approve", "reject"],
    body: VerificationBody,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await admin_service.verify_mentor(session, admin, action, body.mentor_id, body.reason)


@router.put("/users/{user_id}")
async def set_user_status(
    user_id: str,
    body: UserStatusBody,
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    return await admin_service.set_user_status(session, admin, user_id, body.status)
