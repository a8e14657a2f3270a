from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from models.conversation import Conversation
from .base import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for direct-message conversations."""

    model = Conversation

    async def get_by_pair(self, student_user_id: str, mentor_user_id: str) -> Optional[Conversation]:
        stmt = select(Conversation).where(
            Conversation.student_id == student_user_id,
            Conversation.mentor_id == mentor_user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str, role: str) -> List[Conversation]:
        """Conversations where the caller sits on its role's side, newest activity first."""
        column = Conversation.student_id if role == "student" else Conversation.mentor_id
        stmt = select(Conversation).where(column == user_id).order_by(Conversation.updated_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def ids_for_user(self, user_id: str, role: str) -> List[str]:
        column = Conversation.student_id if role == "student" else Conversation.mentor_id
        result = await self.session.execute(select(Conversation.id).where(column == user_id))
        return list(result.scalars().all())
