from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select

from models.mentor import Mentor
from .base import BaseRepository


class MentorRepository(BaseRepository[Mentor]):
    """Repository for Mentor profiles."""

    model = Mentor

    async def get_by_user_id(self, user_id: str) -> Optional[Mentor]:
        stmt = select(Mentor).where(Mentor.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_directory(
        self,
        *,
        min_rating: Optional[float] = None,
        min_experience: Optional[int] = None,
    ) -> List[Mentor]:
        """Approved, active mentors ordered by rating then completed sessions.

        Filters on embedded JSON (expertise field, language) are applied by
        the caller.
        """
        stmt = select(Mentor).where(
            Mentor.verification_status == "approved",
            Mentor.is_active.is_(True),
        )
        if min_rating is not None:
            stmt = stmt.where(Mentor.rating_average >= min_rating)
        if min_experience is not None:
            stmt = stmt.where(Mentor.experience >= min_experience)
        stmt = stmt.order_by(
            Mentor.rating_average.desc(),
            Mentor.total_sessions.desc(),
            Mentor.created_at,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_verification(
        self, status: str, page: int = 1, limit: int = 20
    ) -> Tuple[Sequence[Mentor], int]:
        stmt = (
            select(Mentor)
            .where(Mentor.verification_status == status)
            .order_by(Mentor.created_at.desc())
        )
        return await self.paginate(stmt, page, limit)

    async def list_not_approved(self) -> List[Mentor]:
        stmt = select(Mentor).where(Mentor.verification_status != "approved")
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
