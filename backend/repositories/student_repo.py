from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from models.student import Student
from .base import BaseRepository


class StudentRepository(BaseRepository[Student]):
    """Repository for Student profiles."""

    model = Student

    async def get_by_user_id(self, user_id: str) -> Optional[Student]:
        stmt = select(Student).where(Student.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_newest_first(self) -> List[Student]:
        stmt = select(Student).order_by(Student.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
