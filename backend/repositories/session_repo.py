from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select

from models.session import MentoringSession
from .base import BaseRepository


class SessionRepository(BaseRepository[MentoringSession]):
    """Repository for MentoringSession documents."""

    model = MentoringSession

    async def find_student_clash(
        self,
        student_id: str,
        window_start: datetime,
        window_end: datetime,
        statuses: Sequence[str],
    ) -> Optional[MentoringSession]:
        """First session of the student starting inside ``[window_start, window_end)``."""
        stmt = (
            select(MentoringSession)
            .where(MentoringSession.student_id == student_id)
            .where(MentoringSession.scheduled_date >= window_start)
            .where(MentoringSession.scheduled_date < window_end)
            .where(MentoringSession.status.in_(list(statuses)))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def page_for_student(
        self, student_id: str, status: Optional[str], page: int, limit: int
    ) -> Tuple[Sequence[MentoringSession], int]:
        stmt = select(MentoringSession).where(MentoringSession.student_id == student_id)
        if status:
            stmt = stmt.where(MentoringSession.status == status)
        stmt = stmt.order_by(MentoringSession.scheduled_date.desc())
        return await self.paginate(stmt, page, limit)

    async def page_for_mentor(
        self, mentor_id: str, status: Optional[str], page: int, limit: int
    ) -> Tuple[Sequence[MentoringSession], int]:
        stmt = select(MentoringSession).where(MentoringSession.mentor_id == mentor_id)
        if status:
            stmt = stmt.where(MentoringSession.status == status)
        stmt = stmt.order_by(MentoringSession.scheduled_date.desc())
        return await self.paginate(stmt, page, limit)

    async def page_all(
        self, status: Optional[str], page: int, limit: int
    ) -> Tuple[Sequence[MentoringSession], int]:
        stmt = select(MentoringSession)
        if status:
            stmt = stmt.where(MentoringSession.status == status)
        stmt = stmt.order_by(MentoringSession.scheduled_date.desc())
        return await self.paginate(stmt, page, limit)

    async def upcoming_for_mentor(
        self, mentor_id: str, now: datetime, statuses: Sequence[str], limit: int = 10
    ) -> List[MentoringSession]:
        stmt = (
            select(MentoringSession)
            .where(MentoringSession.mentor_id == mentor_id)
            .where(MentoringSession.scheduled_date >= now)
            .where(MentoringSession.status.in_(list(statuses)))
            .order_by(MentoringSession.scheduled_date.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def recent_completed_for_mentor(
        self, mentor_id: str, limit: int = 5
    ) -> List[MentoringSession]:
        stmt = (
            select(MentoringSession)
            .where(MentoringSession.mentor_id == mentor_id)
            .where(MentoringSession.status == "completed")
            .order_by(MentoringSession.actual_end_time.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def all_for_mentor(self, mentor_id: str) -> List[MentoringSession]:
        stmt = select(MentoringSession).where(MentoringSession.mentor_id == mentor_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def all_for_student(self, student_id: str) -> List[MentoringSession]:
        stmt = select(MentoringSession).where(MentoringSession.student_id == student_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def has_other_completed(
        self, mentor_id: str, student_id: str, exclude_id: str
    ) -> bool:
        """True if the pair already completed a session other than ``exclude_id``."""
        stmt = (
            select(MentoringSession.id)
            .where(MentoringSession.mentor_id == mentor_id)
            .where(MentoringSession.student_id == student_id)
            .where(MentoringSession.status == "completed")
            .where(MentoringSession.id != exclude_id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None
