"""Chat under /api/chat: global wall, conversations, student broadcasts."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from core.dependencies import get_current_user, get_db_session, require_roles
from models.user import User
from services import chat_service

router = APIRouter(prefix="/chat", tags=["chat"])

require_student = require_roles("student")


class WallMessageBody(BaseModel):
    content: Optional[str] = Field(default=None, max_length=2000)
    title: Optional[str] = Field(default=None, max_length=200)


class MessageBody(BaseModel):
    content: Optional[str] = Field(default=None, max_length=2000)


class StartConversationBody(BaseModel):
    # user id of the mentor
    mentor_id: Optional[str] = None
    initial_message: Optional[str] = Field(default=None, max_length=2000)


@router.post("/global", status_code=201)
async def post_global(
    body: WallMessageBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.post_global(session, user, body.content, body.title)


@router.get("/global")
async def list_global(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.list_global(session, page, limit)


@router.get("/conversations")
async def list_conversations(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.list_conversations(session, user)


@router.post("/conversations", status_code=201)
async def start_conversation(
    body: StartConversationBody,
    user: User = Depends(require_student),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.start_conversation(session, user, body.mentor_id, body.initial_message)


@router.get("/conversations/{conversation_id}/messages")
async def conversation_messages(
    conversation_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.conversation_messages(session, user, conversation_id)


@router.post("/conversations/{conversation_id}/messages", status_code=201)
async def send_message(
    conversation_id: str,
    body: MessageBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.send_message(session, user, conversation_id, body.content)


@router.put("/conversations/{conversation_id}/read")
async def mark_read(
    conversation_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.mark_read(session, user, conversation_id)


@router.get("/unread-count")
async def unread_count(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.unread_count(session, user)


@router.post("/broadcast", status_code=201)
async def broadcast(
    body: WallMessageBody,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.broadcast(session, user, body.content, body.title)


@router.get("/broadcast")
async def broadcast_inbox(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    return await chat_service.broadcast_inbox(session, user)
