"""Chat: global wall, student/mentor conversations and student broadcasts."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import BadRequestError, NotFoundError, PermissionDeniedError
from domain.mentoring.types import MessageType, Role
from models.base import utcnow
from models.conversation import Conversation
from models.message import Message
from models.user import User
from repositories.conversation_repo import ConversationRepository
from repositories.message_repo import MessageRepository
from repositories.user_repo import UserRepository
from services.serializers import conversation_dict, message_dict, page_payload


def _require_content(content: Optional[str]) -> str:
    if not content or not content.strip():
        raise BadRequestError("Message content is required")
    return content.strip()


async def _senders(session: AsyncSession, messages: List[Message]) -> Dict[str, User]:
    users = await UserRepository(session).get_many([m.sender_id for m in messages])
    return {u.id: u for u in users}


async def _conversation_for(session: AsyncSession, user: User, conversation_id: str) -> Conversation:
    conversation = await ConversationRepository(session).get_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    if not conversation.has_participant(user.id):
        raise PermissionDeniedError("Access denied")
    return conversation


async def post_global(
    session: AsyncSession, user: User, content: Optional[str], title: Optional[str]
) -> Dict[str, Any]:
    message = await MessageRepository(session).add(
        Message(
            sender_id=user.id,
            content=_require_content(content),
            message_type=MessageType.GLOBAL.value,
            broadcast_title=title or "Global Message",
        )
    )
    return message_dict(message, user)


async def list_global(session: AsyncSession, page: int, limit: int) -> Dict[str, Any]:
    rows, total = await MessageRepository(session).page_global(page, limit)
    senders = await _senders(session, list(rows))
    items = [message_dict(m, senders.get(m.sender_id)) for m in rows]
    return page_payload("messages", items, total, page, limit)


async def _serialize_conversation(session: AsyncSession, conversation: Conversation) -> Dict[str, Any]:
    users = {
        u.id: u
        for u in await UserRepository(session).get_many(
            [conversation.student_id, conversation.mentor_id]
        )
    }
    last = None
    if conversation.last_message_id:
        last = await MessageRepository(session).get_by_id(conversation.last_message_id)
    return conversation_dict(
        conversation,
        student_user=users.get(conversation.student_id),
        mentor_user=users.get(conversation.mentor_id),
        last_message=last,
    )


async def list_conversations(session: AsyncSession, user: User) -> List[Dict[str, Any]]:
    rows = await ConversationRepository(session).list_for_user(user.id, user.role)
    return [await _serialize_conversation(session, c) for c in rows]


async def conversation_messages(
    session: AsyncSession, user: User, conversation_id: str
) -> List[Dict[str, Any]]:
    conversation = await _conversation_for(session, user, conversation_id)
    rows = await MessageRepository(session).list_for_conversation(conversation.id)
    senders = await _senders(session, rows)
    return [message_dict(m, senders.get(m.sender_id)) for m in rows]


async def _append(session: AsyncSession, conversation: Conversation, sender: User, content: str) -> Message:
    message = await MessageRepository(session).add(
        Message(
            conversation_id=conversation.id,
            sender_id=sender.id,
            content=content,
            message_type=MessageType.TEXT.value,
        )
    )
    conversation.last_message_id = message.id
    conversation.updated_at = utcnow()
    await ConversationRepository(session).save(conversation)
    return message


async def send_message(
    session: AsyncSession, user: User, conversation_id: str, content: Optional[str]
) -> Dict[str, Any]:
    text = _require_content(content)
    conversation = await _conversation_for(session, user, conversation_id)
    message = await _append(session, conversation, user, text)
    return message_dict(message, user)


async def start_conversation(
    session: AsyncSession,
    student_user: User,
    mentor_user_id: Optional[str],
    initial_message: Optional[str] = None,
) -> Dict[str, Any]:
    """Open (or reuse) the student's conversation with a mentor user."""
    if not mentor_user_id:
        raise BadRequestError("Mentor ID is required")
    mentor_user = await UserRepository(session).get_by_id(mentor_user_id)
    if mentor_user is None or mentor_user.role != Role.MENTOR.value:
        raise NotFoundError("Mentor not found")

    conversations = ConversationRepository(session)
    conversation = await conversations.get_by_pair(student_user.id, mentor_user.id)
    if conversation is None:
        conversation = await conversations.add(
            Conversation(student_id=student_user.id, mentor_id=mentor_user.id, status="active")
        )
    if initial_message and initial_message.strip():
        await _append(session, conversation, student_user, initial_message.strip())
    return await _serialize_conversation(session, conversation)


async def mark_read(session: AsyncSession, user: User, conversation_id: str) -> Dict[str, Any]:
    conversation = await _conversation_for(session, user, conversation_id)
    updated = await MessageRepository(session).mark_read(conversation.id, user.id)
    return {"message": "Messages marked as read", "updated": updated}


async def unread_count(session: AsyncSession, user: User) -> Dict[str, Any]:
    ids = await ConversationRepository(session).ids_for_user(user.id, user.role)
    return {"unread_count": await MessageRepository(session).count_unread(ids, user.id)}


async def broadcast(
    session: AsyncSession, user: User, content: Optional[str], title: Optional[str]
) -> Dict[str, Any]:
    """One broadcast copy per other active student."""
    text = _require_content(content)
    if user.role != Role.STUDENT.value:
        raise PermissionDeniedError("Only students can send broadcast messages")
    recipients = await UserRepository(session).list_active_by_role(Role.STUDENT.value, exclude_id=user.id)
    if not recipients:
        raise NotFoundError("No other students found")

    now = utcnow()
    messages = await MessageRepository(session).add_all([
        Message(
            sender_id=user.id,
            content=text,
            message_type=MessageType.BROADCAST.value,
            broadcast_title=title or "Student Broadcast",
            broadcast_to=recipient.id,
            created_at=now,
        )
        for recipient in recipients
    ])
    return {
        "message": "Broadcast message sent successfully",
        "sent_to": len(messages),
        "messages": [message_dict(m, user) for m in messages],
    }


async def broadcast_inbox(session: AsyncSession, user: User) -> List[Dict[str, Any]]:
    if user.role != Role.STUDENT.value:
        raise PermissionDeniedError("Only students can receive broadcast messages")
    rows = await MessageRepository(session).broadcasts_for(user.id)
    senders = await _senders(session, rows)
    return [message_dict(m, senders.get(m.sender_id)) for m in rows]
