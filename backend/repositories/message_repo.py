from __future__ import annotations

from typing import List, Sequence, Tuple

from sqlalchemy import func, select, update

from models.message import Message
from .base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    """Repository for chat messages (conversation, global and broadcast)."""

    model = Message

    async def page_global(self, page: int, limit: int) -> Tuple[Sequence[Message], int]:
        stmt = (
            select(Message)
            .where(Message.message_type == "global")
            .order_by(Message.created_at.desc())
        )
        return await self.paginate(stmt, page, limit)

    async def list_for_conversation(self, conversation_id: str) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_read(self, conversation_id: str, reader_id: str) -> int:
        """Mark messages from the other participant as read; returns rows touched."""
        stmt = (
            update(Message)
            .where(Message.conversation_id == conversation_id)
            .where(Message.sender_id != reader_id)
            .where(Message.read.is_(False))
            .values(read=True)
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

    async def count_unread(self, conversation_ids: Sequence[str], reader_id: str) -> int:
        if not conversation_ids:
            return 0
        stmt = (
            select(func.count(Message.id))
            .where(Message.conversation_id.in_(list(conversation_ids)))
            .where(Message.sender_id != reader_id)
            .where(Message.read.is_(False))
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def add_all(self, messages: Sequence[Message]) -> List[Message]:
        self.session.add_all(list(messages))
        await self.session.flush()
        return list(messages)

    async def broadcasts_for(self, user_id: str, limit: int = 50) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.message_type == "broadcast", Message.broadcast_to == user_id)
            .order_by(Message.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
